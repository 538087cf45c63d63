"""Tests for prompt hint extraction."""

from nebulaforge.services.hints import PromptHints, analyze_prompt_hints


class TestGeometryPreference:
    def test_first_table_entry_wins(self):
        # "orb" (sphere) is declared before "crystal" (icosahedron)
        hints = analyze_prompt_hints("an orb of crystal")
        assert hints.geometry_preference == "sphere"

    def test_crystal(self):
        assert analyze_prompt_hints("crystal").geometry_preference == "icosahedron"

    def test_none(self):
        assert analyze_prompt_hints("quiet thing").geometry_preference is None


class TestColors:
    def test_red(self):
        hints = analyze_prompt_hints("a red robot drone")
        assert hints.palette_override == ("#ef4444",)
        assert hints.accent_color == "#ef4444"

    def test_colors_accumulate_in_table_order(self):
        hints = analyze_prompt_hints("Blue and RED and gold")
        assert hints.palette_override == ("#ef4444", "#f59e0b", "#3b82f6")
        assert hints.accent_color == "#ef4444"

    def test_no_colors(self):
        hints = analyze_prompt_hints("plain shape")
        assert hints.palette_override is None
        assert hints.accent_color is None


class TestEnvironment:
    def test_environment_cue(self):
        assert analyze_prompt_hints("a galaxy temple").environment_hint == "nebula"

    def test_multi_word_cue(self):
        assert analyze_prompt_hints("bathed in golden hour").environment_hint == "sunset"

    def test_declared_order(self):
        # "neon" is a city cue, checked before nebula cues
        assert analyze_prompt_hints("neon space bar").environment_hint == "city"


class TestDetailBias:
    def test_mechanical(self):
        assert analyze_prompt_hints("a red robot drone").detail_bias == "mechanical"

    def test_organic_checked_first(self):
        assert analyze_prompt_hints("robot dragon").detail_bias == "organic"

    def test_default_neutral(self):
        assert analyze_prompt_hints("vase").detail_bias == "neutral"


class TestMeshTarget:
    def test_single(self):
        assert analyze_prompt_hints("a single glowing crystal statue").mesh_target == 1

    def test_multi(self):
        assert analyze_prompt_hints("a swarm of drones").mesh_target == 4

    def test_single_beats_multi(self):
        assert analyze_prompt_hints("solo member of the fleet").mesh_target == 1

    def test_unset(self):
        assert analyze_prompt_hints("teapot").mesh_target is None


class TestThemeHint:
    def test_mechanical_before_aero_for_drone(self):
        assert analyze_prompt_hints("a drone").preferred_theme_id == "mechanical"

    def test_abstract_crystal(self):
        assert analyze_prompt_hints("crystal statue").preferred_theme_id == "abstract"

    def test_case_insensitive(self):
        assert analyze_prompt_hints("ROCKET").preferred_theme_id == "aero"

    def test_no_match(self):
        assert analyze_prompt_hints("teapot").preferred_theme_id is None


def test_empty_hints_defaults():
    hints = analyze_prompt_hints("")
    assert hints == PromptHints()
