"""Find the activity behind an editor line, and the lines behind an activity."""

from xamlviz import build_line_index, find_by_key, parse

source = """<Sequence DisplayName="Main">
  <Assign DisplayName="Set x" To="[x]" Value="1" />
  <If DisplayName="Check" Condition="[x &gt; 0]">
    <If.Then>
      <Delay DisplayName="Wait" />
    </If.Then>
  </If>
</Sequence>"""

doc = parse(source)
index = build_line_index(source)

for line in range(1, len(source.splitlines()) + 1):
    key = index.key_at(line)
    node = find_by_key(doc, key) if key else None
    print(f"{line:>3}  {key or '':<20}  {node.type if node else ''}")
