from __future__ import annotations

import errno


def test_error_message_prefers_errno_description_and_appends_path() -> None:
    from db.errors import error_message

    exc = FileNotFoundError(errno.ENOENT, "raw text that should not appear", "seeds/widgets.json")
    assert error_message(exc) == "Error: No such file or directory [seeds/widgets.json]"


def test_error_message_falls_back_to_message() -> None:
    from db.errors import ReconcileError, error_message

    assert error_message(ReconcileError("could not create collection x")) == "Error: could not create collection x"


def test_error_message_includes_seed_error_path() -> None:
    from db.errors import FixtureParseError, error_message

    exc = FixtureParseError("Seed file a does not start with an Array", path="seeds/a.json")
    assert error_message(exc) == "Error: Seed file a does not start with an Array [seeds/a.json]"


def test_error_message_unknown_errno_uses_message() -> None:
    from db.errors import error_message

    exc = OSError(99999, "weird")
    assert error_message(exc).startswith("Error: ")
    assert "weird" in error_message(exc)
