import pytest

from projectide.profiles import AI_PROFILES, get_profile


def test_default_profile_is_first():
    assert get_profile() is AI_PROFILES[0]
    assert get_profile(None).name == "Coder"


def test_lookup_by_name():
    profile = get_profile("React Component Generator")

    assert profile.google_search_enabled
    assert not profile.code_interpreter_enabled
    assert "end of file: src/components/Button.tsx" in profile.system_instruction


def test_unknown_profile():
    with pytest.raises(KeyError):
        get_profile("Nobody")
