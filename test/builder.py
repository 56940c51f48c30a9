# python
"""
Builder behavioral tests (declarative configuration to sealed trees).

Scope
- Validate shape selection precedence (noargs > default > value).
- Validate nesting, duplicate detection and pattern validation at build time.
- Validate Blueprint.from_mapping() key handling.
- Validate that built trees behave like hand-assembled ones.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argot import (
    Blueprint,
    Command,
    RootCommand,
    Shape,
    ValueType,
    build,
    command,
    DuplicateCommandNameError,
)


class TestShapeSelection(TestCase):
    """Behavioral tests for the node shape chosen by the builder."""

    def testNoargsWinsOverEverything(self):
        tree = command("ping", "send", noargs=True, default="x", pattern=r"\d+", optional=False)
        self.assertIs(tree.command.shape, Shape.FLAG)
        self.assertTrue(tree.command.optional)
        self.assertIsNone(tree.command.pattern)

    def testDefaultYieldsDefaultValued(self):
        tree = command("-n", "count", default="1", type=ValueType.INTEGER, pattern=r"\d+")
        self.assertIs(tree.command.shape, Shape.DEFAULT)
        self.assertEqual(tree.command.default, "1")

    def testEmptyDefaultMeansNoDefault(self):
        tree = command("-n", "count", default="")
        self.assertIs(tree.command.shape, Shape.VALUE)

    def testPlainYieldsValue(self):
        mandatory = command("view task", "view", type="integer", pattern=r"\d+")
        optional = command("view task", "view", type="integer", pattern=r"\d+", optional=True)
        self.assertIs(mandatory.command.shape, Shape.VALUE)
        self.assertFalse(mandatory.command.optional)
        self.assertTrue(optional.command.optional)

    def testValuePatternDefaultsToAnything(self):
        tree = command("create task", "create")
        self.assertEqual(tree.parse("create task buy milk"), {"create task": "buy milk"})


class TestBuild(TestCase):
    """Behavioral tests for build() and nesting."""

    def setUp(self):
        self.blueprint = Blueprint("ping", "send an ICMP request", noargs=True, children=[
            Blueprint("-c", "how many to send", type=ValueType.INTEGER, pattern=r"\d+", optional=True),
            Blueprint("-A", "audible ping", noargs=True),
        ])

    def testBuildReturnsRoot(self):
        tree = build(self.blueprint)
        self.assertIsInstance(tree, RootCommand)
        self.assertEqual([child.name for child in tree.children], ["-c", "-A"])
        self.assertTrue(all(isinstance(child, Command) for child in tree.children))

    def testBuiltTreeParses(self):
        tree = build(self.blueprint)
        self.assertEqual(tree.parse("ping -c 3 -A"), {"-c": "3"})
        self.assertEqual(tree.parse("ping"), {})
        self.assertEqual(tree.typed(tree.parse("ping -c 3")), {"-c": 3})

    def testBuiltTreeHelpText(self):
        self.assertEqual(
            build(self.blueprint).help_text(),
            "ping: send an ICMP request\n-c: how many to send\n-A: audible ping",
        )

    def testLeafWithoutChildrenIsRoot(self):
        tree = command("view tasks", "view all", noargs=True)
        self.assertIsInstance(tree, RootCommand)
        self.assertEqual(tree.children, ())

    def testChildWithChildrenBecomesNestedRoot(self):
        tree = command("remote", "remotes", noargs=True, children=[
            Blueprint("add", "add a remote", noargs=True, children=[
                Blueprint("--name", "remote name", pattern=r"\w+"),
            ]),
        ])
        nested, = tree.children
        self.assertIsInstance(nested, RootCommand)
        self.assertEqual(tree.parse("remote add --name origin"), {"--name": "origin"})

    def testOptionalChildWithChildrenMayBeOmitted(self):
        tree = build(Blueprint("ping", noargs=True, children=[
            Blueprint("-x", optional=True, pattern=r"\d+", children=[Blueprint("-y", noargs=True)]),
        ]))
        self.assertTrue(tree.children[0].optional)
        self.assertTrue(tree.validate("ping"))
        self.assertEqual(tree.parse("ping"), {})
        self.assertEqual(tree.parse("ping -x 4 -y"), {"-x": "4"})

    def testFlagChildWithChildrenMayBeOmitted(self):
        tree = command("remote", "", noargs=True, children=[
            Blueprint("add", noargs=True, children=[Blueprint("--name", pattern=r"\w+")]),
        ])
        self.assertTrue(tree.validate("remote"))
        self.assertFalse(tree.validate("remote add"))

    def testMandatoryChildWithChildrenMustBePresent(self):
        tree = command("git", "", noargs=True, children=[
            Blueprint("clone", pattern=r"\S+", children=[Blueprint("--bare", noargs=True)]),
        ])
        self.assertFalse(tree.validate("git"))
        self.assertEqual(tree.parse("git clone url"), {"clone": "url"})

    def testStrictPropagatesToTopLevel(self):
        tree = command("ping", "", noargs=True, strict=True)
        self.assertTrue(tree.strict)
        self.assertFalse(tree.validate("ping extra"))

    def testDuplicateSiblingsRejected(self):
        with self.assertRaises(DuplicateCommandNameError):
            command("ping", "", noargs=True, children=[
                Blueprint("-c", noargs=True),
                Blueprint("-c", pattern=r"\d+"),
            ])

    def testDuplicateInNestedLevelRejected(self):
        with self.assertRaises(DuplicateCommandNameError):
            command("remote", "", noargs=True, children=[
                Blueprint("add", noargs=True, children=[
                    Blueprint("-f", noargs=True),
                    Blueprint("-f", noargs=True),
                ]),
            ])

    def testInvalidPatternRejected(self):
        with self.assertRaises(ValueError):
            command("-c", "", pattern=r"[0-9")

    def testNonBlueprintRejected(self):
        with self.assertRaises(TypeError):
            build("ping")

    def testBuildIsRepeatable(self):
        first, second = build(self.blueprint), build(self.blueprint)
        self.assertIsNot(first, second)
        self.assertEqual(first.help_text(), second.help_text())


class TestBlueprint(TestCase):
    """Behavioral tests for Blueprint construction and mappings."""

    def testFieldsAreExposed(self):
        blueprint = Blueprint("-c", "count", type="integer", pattern=r"\d+", optional=True)
        self.assertEqual(blueprint.name, "-c")
        self.assertEqual(blueprint.descr, "count")
        self.assertEqual(blueprint.type, "integer")
        self.assertTrue(blueprint.optional)
        self.assertFalse(blueprint.noargs)
        self.assertIsNone(blueprint.default)
        self.assertEqual(blueprint.children, ())

    def testBlueprintIsSealed(self):
        blueprint = Blueprint("-c")
        with self.assertRaises(AttributeError):
            blueprint._name = "-d"

    def testEmptyNameRejected(self):
        with self.assertRaises(ValueError):
            Blueprint("  ")

    def testStringChildrenRejected(self):
        with self.assertRaises(TypeError):
            Blueprint("ping", children="-c")

    def testFromMapping(self):
        blueprint = Blueprint.from_mapping({
            "name": "ping",
            "help": "send an ICMP request",
            "noargs": True,
            "children": [
                {"name": "-c", "help": "how many to send", "type": "integer", "pattern": r"\d+", "optional": True},
                {"name": "-n", "descr": "count", "default": "1"},
            ],
        })
        self.assertEqual(blueprint.descr, "send an ICMP request")
        self.assertEqual([child.name for child in blueprint.children], ["-c", "-n"])
        self.assertIsInstance(blueprint.children[0], Blueprint)

        tree = build(blueprint)
        self.assertIs(tree.children[1].shape, Shape.DEFAULT)
        self.assertEqual(tree.parse("ping -c 2 -n"), {"-c": "2", "-n": "1"})

    def testBuildAcceptsMapping(self):
        tree = build({"name": "view tasks", "help": "view all", "noargs": True})
        self.assertEqual(tree.help_text(), "view tasks: view all")

    def testUnknownKeyRejected(self):
        with self.assertRaises(ValueError):
            Blueprint.from_mapping({"name": "ping", "nargs": 1})

    def testMissingNameRejected(self):
        with self.assertRaises(ValueError):
            Blueprint.from_mapping({"help": "nameless"})

    def testHelpAndDescrTogetherRejected(self):
        with self.assertRaises(ValueError):
            Blueprint.from_mapping({"name": "ping", "help": "a", "descr": "b"})

    def testNonMappingRejected(self):
        with self.assertRaises(TypeError):
            Blueprint.from_mapping([("name", "ping")])


if __name__ == "__main__":
    unittest.main()
