"""
Options module behavioral tests (normalizer, option entity, registry).

Scope
- Validate classify(): role tagging, placeholder insertion, padding, the
  description shift, and the True-as-required shorthand.
- Validate normalize(): keyword precedence, modes, idempotence on canonical tuples.
- Validate Option: invariants, keys, names, defaults, switches, callbacks.
- Validate Registry: insertion order, duplicate rejection, first-match lookup.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from flagship import Definition, Mode, Option, Registry, Role, Slot, classify, normalize
from flagship.utils import Unset


def values(slots):
    return tuple(slot.value for slot in slots)


class TestClassify(TestCase):
    """Behavioral tests for the positional role heuristic."""

    def testClassifyTagsRolesInOrder(self):
        slots = classify(["n", "name", "Your name", True])
        self.assertEqual([slot.role for slot in slots], [Role.SHORT, Role.LONG, Role.DESCRIPTION, Role.ARGUMENT])
        self.assertEqual(slots[0], Slot(Role.SHORT, "n"))

    def testClassifyFullDefinitionUnchanged(self):
        self.assertEqual(values(classify(["n", "name", "Your name", True])), ("n", "name", "Your name", True))

    def testClassifyEmptyInsertsPlaceholder(self):
        self.assertEqual(values(classify([])), (None, Unset, Unset, False))

    def testClassifyLongFirstValueIsLongName(self):
        self.assertEqual(values(classify(["name"])), (None, "name", Unset, False))

    def testClassifyLongNameWithDescription(self):
        self.assertEqual(
            values(classify(["verbose", "Enable verbose mode"])),
            (None, "verbose", "Enable verbose mode", False)
        )

    def testClassifyDescriptionShiftsIntoDescriptionSlot(self):
        self.assertEqual(values(classify(["n", "Your name"])), ("n", Unset, "Your name", Unset))

    def testClassifyDescriptionShiftCarriesArgument(self):
        self.assertEqual(values(classify(["n", "Your name", True])), ("n", Unset, "Your name", True))

    def testClassifyTrueAfterShortMeansRequired(self):
        self.assertEqual(values(classify(["n", True])), ("n", Unset, Unset, True))

    def testClassifyTrueInDescriptionSlotMeansRequired(self):
        self.assertEqual(values(classify(["n", "name", True])), ("n", "name", Unset, True))

    def testClassifyExplicitNoneFirstIsPlaceholder(self):
        self.assertEqual(values(classify([None, "name", "desc", True])), (None, "name", "desc", True))

    def testClassifyUnsetLongSlotStaysInPlace(self):
        self.assertEqual(values(classify(["n", None, "desc"])), ("n", None, "desc", False))

    def testClassifyShortStringIsNeverDescription(self):
        # a single character always lands in the short slot
        self.assertEqual(values(classify(["x"]))[0], "x")

    def testClassifyRejectsMoreThanFourValues(self):
        with self.assertRaises(TypeError):
            classify(["n", "name", "desc", True, "extra"])

    def testClassifyIsPure(self):
        source = ["n", True]
        classify(source)
        self.assertEqual(source, ["n", True])


class TestNormalize(TestCase):
    """Behavioral tests for the canonical definition builder."""

    def testNormalizeFullDefinition(self):
        self.assertEqual(
            normalize("n", "name", "Your name", True),
            Definition("n", "name", "Your name", Mode.REQUIRED)
        )

    def testNormalizeShortWithTrue(self):
        self.assertEqual(normalize("n", True), Definition("n", None, None, Mode.REQUIRED))

    def testNormalizeDefaultsToNoArgument(self):
        self.assertEqual(normalize("v", "verbose"), Definition("v", "verbose", None, Mode.NONE))

    def testNormalizeLongNameWithDigitsIsDescription(self):
        self.assertEqual(normalize("n", "name2"), Definition("n", None, "name2", Mode.NONE))

    def testNormalizeAcceptsUnderscoresAndHyphens(self):
        self.assertEqual(normalize("n", "full_name-x").long, "full_name-x")

    def testNormalizeIsIdempotentOnCanonicalTuples(self):
        for definition in (
                Definition("n", "name", "Your name", Mode.REQUIRED),
                Definition("l", "level", "Log level", Mode.OPTIONAL),
                Definition(None, "verbose", None, Mode.NONE),
                Definition("q", None, "Quiet", Mode.NONE),
        ):
            with self.subTest(definition=definition):
                self.assertEqual(normalize(*definition), definition)

    def testNormalizeKeywordsWinOverPositionals(self):
        self.assertEqual(
            normalize("n", "name", "Your name", True, description="Other", argument=False),
            Definition("n", "name", "Other", Mode.NONE)
        )

    def testNormalizeKeywordIdentifiers(self):
        self.assertEqual(normalize(short="n", long="name"), Definition("n", "name", None, Mode.NONE))

    def testNormalizeOptionalKeyword(self):
        self.assertEqual(normalize("l", "level", optional=True).mode, Mode.OPTIONAL)

    def testNormalizeModeKeyword(self):
        self.assertEqual(normalize("l", "level", mode=Mode.REQUIRED).mode, Mode.REQUIRED)

    def testNormalizeRejectsUnknownKeywords(self):
        with self.assertRaises(TypeError):
            normalize("n", colour="red")

    def testNormalizeRejectsBadArgumentValue(self):
        with self.assertRaises(TypeError):
            normalize("n", "name", "desc", "yes")


class TestOption(TestCase):
    """Behavioral tests for the option entity."""

    def testOptionKeyPrefersLongName(self):
        self.assertEqual(Option("n", "name").key, "name")
        self.assertEqual(Option("n").key, "n")

    def testOptionNames(self):
        self.assertEqual(Option("n", "name").names, ("-n", "--name"))
        self.assertEqual(Option("verbose").names, ("--verbose",))

    def testOptionMetadata(self):
        o = Option("n", "name", "Your name", True)
        self.assertEqual((o.short, o.long, o.description, o.mode), ("n", "name", "Your name", Mode.REQUIRED))
        self.assertFalse(o.switch)
        self.assertIsNone(o.callback)

    def testOptionRequiresAnIdentifier(self):
        with self.assertRaises(ValueError):
            Option("Your name only")

    def testOptionShortMustBeString(self):
        with self.assertRaises(TypeError):
            Option(5)

    def testOptionShortMustBeOneCharacter(self):
        with self.assertRaises(ValueError):
            Option("")
        with self.assertRaises(ValueError):
            Option(short="nm", long="name")

    def testOptionLongCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Option("n", long="")

    def testOptionDescriptionMustBeString(self):
        with self.assertRaises(TypeError):
            Option("n", "name", description=3)

    def testOptionCallbackMustBeCallable(self):
        with self.assertRaises(TypeError):
            Option("n", callback=5)

    def testOptionStartsUnset(self):
        o = Option("n", True)
        self.assertIsNone(o.value)
        self.assertFalse(o.present)

    def testOptionDefaultDeclaredEvenWhenNone(self):
        self.assertTrue(Option("n", default=None).declared)
        self.assertFalse(Option("n").declared)
        self.assertEqual(Option("l", "level", optional=True, default="info").default, "info")

    def testOptionEffectiveFallsBackToDefault(self):
        o = Option("l", "level", optional=True, default="info")
        self.assertEqual(o.effective, "info")
        o.assign("debug")
        self.assertEqual(o.effective, "debug")

    def testOptionExported(self):
        self.assertTrue(Option("n", True).exported)
        self.assertFalse(Option("l", optional=True).exported)
        self.assertTrue(Option("l", optional=True, default=None).exported)
        self.assertTrue(Option("v", default=False).exported)
        self.assertFalse(Option("v", "verbose").exported)
        self.assertFalse(Option("c", "color", switch=True).exported)

    def testOptionToggleStartsFromBooleanDefault(self):
        o = Option("c", "color", switch=True, default=True)
        self.assertFalse(o.toggle())
        self.assertTrue(o.toggle())

    def testOptionToggleStartsFromFalse(self):
        o = Option("c", "color", switch=True, default="auto")
        self.assertTrue(o.toggle())

    def testOptionResetForgetsRuntimeState(self):
        o = Option("n", True)
        o.recognize()
        o.assign("Lee")
        o.reset()
        self.assertIsNone(o.value)
        self.assertFalse(o.present)

    def testOptionCallFiresCallback(self):
        called = []
        o = Option("v", callback=lambda: called.append(True))
        o()
        self.assertEqual(called, [True])

    def testOptionCallWithoutCallbackIsNoop(self):
        self.assertIsNone(Option("v")())

    def testOptionMatches(self):
        o = Option("n", "name")
        self.assertTrue(o.matches("n"))
        self.assertTrue(o.matches("name"))
        self.assertFalse(o.matches("-n"))
        self.assertFalse(Option("n").matches(None))

    def testOptionRepr(self):
        self.assertTrue(repr(Option("n", "name")).startswith("option(key='name'"))


class TestRegistry(TestCase):
    """Behavioral tests for the option registry."""

    def testRegistryKeepsInsertionOrder(self):
        first, second, third = Option("b"), Option("a"), Option("c")
        registry = Registry([first, second, third])
        self.assertEqual(list(registry), [first, second, third])
        self.assertEqual(len(registry), 3)

    def testRegistryAddReturnsOption(self):
        registry = Registry()
        o = Option("n")
        self.assertIs(registry.add(o), o)

    def testRegistryRejectsDuplicateShort(self):
        with self.assertRaises(ValueError):
            Registry([Option("n", "name"), Option("n", "nick")])

    def testRegistryRejectsDuplicateLong(self):
        with self.assertRaises(ValueError):
            Registry([Option("n", "name"), Option("m", "name")])

    def testRegistryRejectsSameOptionTwice(self):
        registry = Registry()
        o = Option("n")
        registry.add(o)
        with self.assertRaises(ValueError):
            registry.add(o)

    def testRegistryRejectsNonOptions(self):
        with self.assertRaises(TypeError):
            Registry().add("n")

    def testRegistryLookup(self):
        o = Option("n", "name")
        registry = Registry([o, Option("v")])
        self.assertIs(registry.lookup("n"), o)
        self.assertIs(registry.lookup("name"), o)
        self.assertIsNone(registry.lookup("x"))
        self.assertIsNone(registry.lookup(None))

    def testRegistryContains(self):
        o = Option("n", "name")
        registry = Registry([o])
        self.assertIn("name", registry)
        self.assertIn(o, registry)
        self.assertNotIn(Option("n"), registry)
        self.assertNotIn("x", registry)

    def testRegistryResetsEveryOption(self):
        o = Option("n", True)
        registry = Registry([o])
        o.assign("Lee")
        registry.reset()
        self.assertIsNone(o.value)


if __name__ == "__main__":
    unittest.main()
