"""Interactive questions asked during cleanup."""

from typing import Sequence

from rich.console import Console

YES_ANSWERS = ("yes", "y")
NO_ANSWERS = ("no", "n")


class PromptError(Exception):
    """The prompt channel failed (closed input, interrupt)."""


class InvalidAnswer(ValueError):
    """A well-formed answer that is not one of the accepted values."""

    def __init__(self, answer: str, expected: Sequence[str]) -> None:
        """Initialize error.

        Args:
            answer: What the user typed
            expected: Accepted answers, for the re-prompt message
        """
        super().__init__(f"Please enter {' or '.join(expected)} (got {answer!r})")
        self.answer = answer
        self.expected = tuple(expected)


class Prompter:
    """Synchronous question/answer service on top of a rich console."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def _ask(self, question: str) -> str:
        try:
            return self.console.input(f"{question} ").strip()
        except (EOFError, KeyboardInterrupt) as err:
            raise PromptError("No answer received from the prompt") from err

    def ask_number(self, question: str, choices: Sequence[int]) -> int:
        """Ask for one of a fixed set of numbers.

        Raises:
            InvalidAnswer: If the answer is not a number in ``choices``
            PromptError: If no answer can be read
        """
        answer = self._ask(question)
        expected = [str(choice) for choice in choices]
        try:
            value = int(answer)
        except ValueError as err:
            raise InvalidAnswer(answer, expected) from err
        if value not in choices:
            raise InvalidAnswer(answer, expected)
        return value

    def ask_word(self, question: str, words: Sequence[str]) -> str:
        """Ask for one of a fixed set of words, compared case-insensitively.

        Returns the matching entry of ``words`` as spelled there.
        """
        answer = self._ask(question)
        for word in words:
            if answer.lower() == word.lower():
                return word
        raise InvalidAnswer(answer, words)

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question (``yes``/``y``/``no``/``n``, any case)."""
        answer = self._ask(f"{question} (yes/no)")
        if answer.lower() in YES_ANSWERS:
            return True
        if answer.lower() in NO_ANSWERS:
            return False
        raise InvalidAnswer(answer, ["yes", "no"])
