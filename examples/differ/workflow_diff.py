"""Structural diff — know which activities changed between two revisions."""

from xamlviz import common_parts, compare

old_source = """<Sequence DisplayName="Main">
  <Assign DisplayName="Set total" To="[total]" Value="[price * 2]" />
  <LogMessage DisplayName="Log" Message="[total.ToString]" />
</Sequence>"""

new_source = """<Sequence DisplayName="Main">
  <Assign DisplayName="Set total" To="[total]" Value="[price * 3]" />
  <LogMessage DisplayName="Log" Message="[total.ToString]" />
  <Delay DisplayName="Pause" />
</Sequence>"""

result = compare(old_source, new_source)

print("Changes:")
for entry in result.diff.entries():
    print(f"  {entry.kind.value}: {entry.node.type} {entry.node.display_name!r}")
    for change in entry.property_changes:
        if isinstance(change.before, str) and isinstance(change.after, str):
            marked = "".join(
                part.value if part.is_common else f"[-{part.value}-]"
                for part in common_parts(change.before, change.after)
            )
            print(f"    {change.property_name}: {marked} -> {change.after}")
        else:
            print(f"    {change.property_name}: {change.before!r} -> {change.after!r}")
