from __future__ import annotations

from gitglobal.errors import ExitCode, GitGlobalError, user_facing_error


def test_exit_codes_are_deterministic() -> None:
    assert int(ExitCode.SUCCESS) == 0
    assert int(ExitCode.INVALID_ARGS) == 2
    assert int(ExitCode.CONFIG_ERROR) == 3
    assert int(ExitCode.RUNTIME_ERROR) == 4
    assert int(ExitCode.CACHE_ERROR) == 5


def test_error_defaults_to_runtime_code() -> None:
    assert GitGlobalError("boom").code == ExitCode.RUNTIME_ERROR


def test_error_string_contains_hint() -> None:
    err = GitGlobalError("cache unwritable", code=ExitCode.CACHE_ERROR, hint="Check permissions")
    assert str(err) == "cache unwritable Hint: Check permissions"


def test_error_string_without_hint() -> None:
    assert str(GitGlobalError("msg")) == "msg"


def test_user_facing_error_template() -> None:
    assert user_facing_error("something went wrong") == "Error: something went wrong."
    assert (
        user_facing_error("something went wrong", hint="try again")
        == "Error: something went wrong. Next step: try again"
    )
