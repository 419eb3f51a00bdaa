#!/usr/bin/env python3
"""Demonstration of type expansion and selection-set synthesis.

This script shows how to:
1. Load a schema from SDL
2. Expand a root type into the types it requires
3. Build selection sets and a complete query document

Note: This demo doesn't make real API calls.
"""

from gql_typegraph.core import (
    OperationBuilder,
    Schema,
    SelectionSetBuilder,
    TypeConfig,
    expand_types,
)

SDL = """
interface Animal {
  name: String
  age: Int
}

type Dog implements Animal {
  name: String
  age: Int
  breed: String
}

type Cat implements Animal {
  name: String
  age: Int
  indoor: Boolean
}

type Owner {
  id: ID!
  pets: [Animal!]!
  favorite: Animal
}

type Query {
  owner(id: ID!): Owner
  owners: [Owner!]!
}
"""


def main():
    schema = Schema.from_sdl(SDL)

    print("=" * 60)
    print("Expansion of Owner (single hop)")
    print("=" * 60)
    for type_def in expand_types(schema, [TypeConfig(name="Owner")]):
        print(f"  {type_def.name} ({type_def.kind.value})")

    print()
    print("=" * 60)
    print("Selection set for Owner (max depth 2)")
    print("=" * 60)
    owner = schema.lookup_type_by_name("Owner")
    print(SelectionSetBuilder(schema, max_depth=2).build(owner))

    print()
    print("=" * 60)
    print("Query document for owner(id:)")
    print("=" * 60)
    print(OperationBuilder(schema).build_query(["owner"], max_depth=2).render())


if __name__ == "__main__":
    main()
