#!/usr/bin/env python3
"""
Quick Start Guide for Fluent XML.

Builds a document with the fluent node API, reads values back with path
expressions, and flattens XML into dotted-path maps.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fluent_xml import FluentXML, XMLConfig, create, parse, to_map, to_multi_map

ORDER_XML = """<order id="1234">
    <book title="Fluent Lookups">
        <author name="The Author"/>
        <illustrator NAME="The Illustrator"/>
        <publication publicationDate="20120101"/>
    </book>
    <locations>
        <location city="London" country="UK"/>
        <location city="Leeds" country="UK"/>
        <location city="Paris" country="FR"/>
    </locations>
</order>"""


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - Fluent XML")
    print("=" * 30)

    # Step 1: Build a document
    print("\n📄 Step 1: Building a Document")
    print("-" * 30)

    root = (
        create("demo").set_text("Root blah")
        .create_child("demo1").set_text("Blah 1").set_attribute("id", "scooby")
        .create_child("address").set_text("Address 1").end_node()
        .create_child("country").set_text("UK").end_node()
        .end_all()
    )

    print(root.render())
    print(f"✅ Built {sum(1 for _ in root.iter_nodes())} nodes")

    # Step 2: Path lookups
    print("\n🔍 Step 2: Path Lookups")
    print("-" * 30)

    print(f"  //demo1/@id          -> {root.get('//demo1/@id')!r}")
    print(f"  //demo1/address/text() -> {root.get('//demo1/address/text()')!r}")

    result = root.query("//missing/@id")
    print(f"  //missing/@id        -> {result.value!r} (matched: {result.matched})")

    # Step 3: Loading existing XML
    print("\n📥 Step 3: Loading Existing XML")
    print("-" * 30)

    order = parse(ORDER_XML)
    print(f"  Author:      {order.get('//author/@name|NAME')}")
    print(f"  Illustrator: {order.get('//illustrator/@name|NAME')}")
    print(f"  Published:   {order.get('//publication/@publicationDate|date')}")

    print("  Locations:")
    order.get_each(
        "//locations/location/@",
        lambda attributes: print(f"    - {attributes['city']} ({attributes['country']})")
    )

    # Step 4: Flattening
    print("\n🔄 Step 4: Flattening")
    print("-" * 30)

    for key, value in to_map(ORDER_XML).items():
        if value:
            print(f"  {key} = {value}")

    cities = to_multi_map(ORDER_XML)["order.locations.location.city"]
    print(f"  All cities: {', '.join(cities)}")

    print("\n🎉 Quick start complete!")


def configured_facade_example():
    """Example showing the configured facade and its statistics."""

    print("\n\n⚙️  CONFIGURED FACADE EXAMPLE")
    print("=" * 35)

    xml = FluentXML(
        XMLConfig().override(flatten__key_separator="/", name="slash-keys"),
        correlation_id="quick-start"
    )

    mapping = xml.to_map('<catalog><item sku="A1">Pen</item></catalog>')
    print(f"  Mapping: {mapping}")

    broken = xml.flatten("<catalog><item></catalog>")
    print(f"  Broken input success: {broken.success}")
    for diagnostic in broken.diagnostics:
        print(f"    {diagnostic.severity.name}: {diagnostic.message}")

    print("\n📊 Statistics:")
    for name, value in xml.statistics.items():
        print(f"  {name}: {value}")


def main():
    """Main function."""
    try:
        quick_start_example()
        configured_facade_example()

        print("\n✅ All examples completed successfully!")
        return 0

    except Exception as e:
        print(f"\n❌ Example failed: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
