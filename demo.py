#!/usr/bin/env python3
"""
Demo script for the tech tree layout engine.

Lays out a small tech tree, applies a few edits and prints the positions
and connectors after each one.
"""

import logging

from techtree import TechTreeGenerator, TreeEditor, load_nodes, setup_logging

TREE = [
    {"title": "Cell Biology", "type": "core-technology", "relations": []},
    {
        "title": "Gene Therapy",
        "type": "longevity-tech",
        "relations": ["Cell Biology"],
    },
    {
        "title": "Senolytics",
        "type": "longevity-tech",
        "relations": ["Cell Biology"],
    },
    {"title": "Computing", "type": "general-improvement", "relations": []},
    {
        "title": "Biomarkers",
        "type": "core-technology",
        "relations": ["Computing", "Gene Therapy"],
    },
]


def print_header(title):
    """Print a formatted header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70 + "\n")


def print_plan(plan):
    for item in plan:
        print(
            f"{item.node.title:<20} top={item.position.top:<7} "
            f"left={item.position.left:<7} [{item.node.type.label}]"
        )
        for connector in item.connectors:
            print(
                f"    <- {connector.source_id:<16} "
                f"anchor={connector.anchor_offset:<5} weight={connector.weight}"
            )
    print(f"\nSpacer height: {plan.spacer_height}")


def main():
    setup_logging(logging.INFO)
    generator = TechTreeGenerator()
    editor = TreeEditor(load_nodes(TREE))

    print_header("Demo 1: Initial Layout")
    print_plan(generator.generate(editor.model))

    print_header("Demo 2: Add a Node After Senolytics")
    editor.create("Senolytics")
    editor.commit("Rejuvenation Therapy", "longevity-tech", "Senolytics, Biomarkers")
    print_plan(generator.generate(editor.model))

    print_header("Demo 3: Rename Cell Biology")
    editor.begin_edit("cell-biology")
    editor.commit("Molecular Biology", "core-technology", "")
    print_plan(generator.generate(editor.model))

    print_header("Demo 4: Delete Computing (Biomarkers Keeps a Dangling Relation)")
    editor.delete("Computing")
    plan = generator.generate(editor.model, debug=True)
    print_plan(plan)
    print()
    print(generator.get_trace().summary())

    warnings = editor.model.validate().warnings()
    if warnings:
        print_header("Validation Warnings")
        for warning in warnings:
            print(warning)


if __name__ == "__main__":
    main()
