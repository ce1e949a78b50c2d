#!/usr/bin/env python3
"""
Example usage of the JSON Workbench.

This script walks through a workbench session: load JSON, run a transform,
look at the result as a table, schema and YAML, revert, and share the
state as a link.
"""

import asyncio
import json
from src.json_workbench import (
    HistoryStore,
    SchemaInferrer,
    ShareCodec,
    ShapeUtils,
    YamlWriter,
)


async def main():
    """Main example function."""
    print("JSON Workbench Example")
    print("=" * 50)

    # Create sample data
    sample_data = {
        "orders": [
            {"id": "A-100", "customer": "Alice", "total": 120.5, "items": 3, "paid": True},
            {"id": "A-101", "customer": "Bob", "total": 45, "items": 1, "paid": False},
            {"id": "A-102", "customer": "Carol", "total": 310.25, "items": 7, "paid": True},
            {"id": "A-103", "customer": "Alice", "total": 18.0, "items": 1, "paid": True},
        ],
        "currency": "EUR"
    }

    store = HistoryStore(json_input=json.dumps(sample_data, indent=2))
    print(f"Input parsed: {store.state.json_parse_error is None}")

    # Sum paid order totals per customer
    store.set_transform_script(
        'paid = _.filter_(data["orders"], "paid")\n'
        'console.log("paid orders:", len(paid))\n'
        'grouped = _.group_by(paid, "customer")\n'
        'return [\n'
        '    {"customer": name, "orders": len(rows), "total": _.sum_by(rows, "total")}\n'
        '    for name, rows in grouped.items()\n'
        ']\n'
    )

    result = store.execute_transform()
    if not result.success:
        print(f"❌ Transform failed: {store.state.transform_error}")
        return

    print("✅ Transform applied")
    for entry in store.state.console_logs:
        print(f"   [{entry.level.value}] {' '.join(str(arg) for arg in entry.args)}")

    transformed = store.state.transformed_json

    # Table view
    rows, columns = ShapeUtils.tabulate(transformed)
    print(f"\nTable ({len(rows)} rows):")
    print("   " + " | ".join(columns))
    for row in rows:
        print("   " + " | ".join(ShapeUtils.format_cell(row.get(col)) for col in columns))

    numeric = ShapeUtils.numeric_columns(rows, columns)
    print(f"\nChart data (x=customer, y={', '.join(numeric)}):")
    print(f"   {ShapeUtils.chart_rows(rows, 'customer', numeric)}")

    print("\nJSON Schema:")
    print(SchemaInferrer().to_json_schema_text(transformed, "CustomerTotals"))

    print("\nYAML:")
    print(YamlWriter().dumps(transformed))

    # Undo the transform
    store.revert()
    print(f"\nReverted, history depth now {len(store.state.history)}")

    # Share the editable state
    codec = ShareCodec()
    token = await codec.encode(store.snapshot())
    url = codec.build_share_url("http://localhost:3000/", token)
    print(f"\nShare link ({len(url)} characters):")
    print(f"   {url[:80]}...")

    other = HistoryStore()
    if await codec.hydrate(other, url):
        print("✅ Share link opened in a fresh workbench")
        print(f"   Same input: {other.state.parsed_json == store.state.parsed_json}")


if __name__ == "__main__":
    asyncio.run(main())
