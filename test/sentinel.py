"""
Tests for the Unset singleton.

This module verifies semantic guarantees of the `UnsetType` sentinel, which is
also the absence marker of a resolved value:
- Singleton identity (single instance per interpreter process).
- Falsy semantics and representation behavior.
- Rich rendering integration.
- Copying, pickling, and thread safety properties.
- Finality (type cannot be subclassed).
- coalesce() only replaces the sentinel.
"""
import copy
import pickle
import unittest
from threading import Thread, Lock
from unittest import TestCase

from rich.console import Console
from rich.text import Text

from cmdpro.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def setUp(self) -> None:
        self.unset: UnsetType = UnsetType()

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(self.unset, UnsetType())
        self.assertIs(Unset, self.unset)

    def testRich(self) -> None:
        self.assertEqual(self.unset.__rich__(), Text("Unset", style="dim"))

    def testRichConsolePrint(self) -> None:
        """
        Console.print(...) renders 'Unset' without ANSI when color is disabled.
        """
        console = Console(color_system=None, force_terminal=False)
        with console.capture() as capture:
            console.print(self.unset)
        self.assertEqual(capture.get().strip(), "Unset")

    def testRepr(self) -> None:
        self.assertEqual(repr(self.unset), "Unset")
        self.assertEqual(str(self.unset), "Unset")

    def testFalsely(self) -> None:
        self.assertFalse(bool(self.unset))

    def testNotEqualToNoneOrFalse(self) -> None:
        """
        Falsy does not imply equality with other falsy values (None/False/0).
        """
        self.assertNotEqual(self.unset, None)
        self.assertNotEqual(self.unset, False)  # noqa: E712
        self.assertNotEqual(self.unset, 0)

    def testUnionWithTypes(self) -> None:
        """
        The sentinel takes part in PEP 604 unions used by isinstance() checks.
        """
        self.assertTrue(isinstance(self.unset, str | Unset))
        self.assertTrue(isinstance("text", str | Unset))
        self.assertFalse(isinstance(None, str | Unset))

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(self.unset), self.unset)
        self.assertIs(copy.deepcopy(self.unset), self.unset)

    def testPickleRoundTrip(self) -> None:
        data: bytes = pickle.dumps(self.unset)
        self.assertIs(pickle.loads(data), self.unset)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance.
        """
        results: list[UnsetType] = []
        lock: Lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads: list[Thread] = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(results), 16)
        for instance in results:
            self.assertIs(instance, self.unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalseyValues(self) -> None:
        for object in (None, 0, "", [], False):
            with self.subTest(object=object):
                self.assertIs(coalesce(object, "fallback"), object)


class OrdinalTest(TestCase):

    def testWords(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self) -> None:
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(113), "113th")


class FreezeTest(TestCase):

    def testMutableContainersAreFrozen(self) -> None:
        self.assertEqual(freeze([1, 2]), (1, 2))
        self.assertEqual(freeze({1, 2}), frozenset({1, 2}))
        frozen = freeze({"a": 1})
        with self.assertRaises(TypeError):
            frozen["a"] = 2  # type: ignore[index]

    def testImmutableObjectsPassThrough(self) -> None:
        object = (1, 2)
        self.assertIs(freeze(object), object)
        self.assertIs(freeze("text"), "text")


if __name__ == '__main__':
    unittest.main()
