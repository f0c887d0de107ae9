"""Hand a parsed workflow to a browser view — JSON round-trip."""

from xamlviz import parse
from xamlviz.serialization import from_json, to_json

doc = parse(
    '<Sequence DisplayName="Main"><Delay DisplayName="Wait" Duration="00:00:05" /></Sequence>'
)

json_str = to_json(doc)
restored = from_json(json_str)

print("Original == restored:", doc == restored)
print("JSON length:", len(json_str), "chars")
