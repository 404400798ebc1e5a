import unittest

from codesessions.utils.sanitize import sanitize_code


class TestSanitizeCode(unittest.TestCase):

    def test_strips_fenced_block_with_language_hint(self):
        self.assertEqual(sanitize_code("```python\nprint(1)\n```"), "print(1)")

    def test_language_hint_is_case_insensitive(self):
        self.assertEqual(sanitize_code("```PyThOn\nx = 1"), "x = 1")

    def test_strips_leading_and_trailing_whitespace(self):
        self.assertEqual(sanitize_code("  \n\tprint('a')  \n"), "print('a')")

    def test_plain_code_is_unchanged(self):
        code = "def f(x):\n    return x * 2\n\nf(3)"
        self.assertEqual(sanitize_code(code), code)

    def test_inner_backticks_and_whitespace_are_kept(self):
        code = "s = '`a`'\nprint(s)"
        self.assertEqual(sanitize_code(code), code)

    def test_identifier_starting_with_python_is_kept(self):
        code = "```python\npython_version = 3\nprint(python_version)\n```"
        self.assertEqual(sanitize_code(code), "python_version = 3\nprint(python_version)")
        self.assertEqual(sanitize_code("```python\npythonpath = '/x'"), "pythonpath = '/x'")
        self.assertEqual(sanitize_code("pythonic = 1"), "pythonic = 1")
        self.assertEqual(sanitize_code("python3 -c 'x'"), "python3 -c 'x'")

    def test_only_formatting_sanitizes_to_empty(self):
        self.assertEqual(sanitize_code("```python\n```"), "")
        self.assertEqual(sanitize_code(" ` python `\n"), "")

    def test_idempotent(self):
        samples = [
            "```python\nprint(1)\n```",
            "python python\nx = 1",
            "  `python`\n  y = 2  ",
            "``` \n pythonpython x ``",
            "print('no formatting')",
            "",
        ]
        for code in samples:
            with self.subTest(code=code):
                once = sanitize_code(code)
                self.assertEqual(sanitize_code(once), once)


if __name__ == "__main__":
    unittest.main()
