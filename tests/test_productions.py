"""
End-to-end tests for the registered productions.
"""

import math
import shutil

import pytest
from pydantic import ValidationError

from animatics.core import BASE
from animatics.engine.assets import AssetResolver
from animatics.engine.composer import CompositionRegistry
from animatics.engine.errors import MissingAssetReferenceError
from animatics.engine.sdk import Paths
from animatics.productions import PRODUCTIONS, brandos_promo, build_registry, register_all


class TestBrickByBrick:
    def test_registration(self, productions):
        config = productions.get("BrickByBrick").config
        assert config.duration_in_frames == 840
        assert config.fps == 30
        assert (config.width, config.height) == (1920, 1080)

    def test_acts(self, productions):
        root = productions.get("BrickByBrick").root
        assert [child.name for child in root.children] == ["composition_background", "weight", "build", "rise"]
        assert root.children[1].label == "Act 1: The Weight"

    def test_typewriter_at_frame_45(self, productions):
        result = productions.render("BrickByBrick", 45)
        assert result.errors == []
        caption = result.tree.find("text_reveal")
        assert caption.props["text"] == "Nobody taugh"
        assert caption.props["visible_chars"] == math.floor((45 - 30) * 0.8) == 12
        assert caption.props["caret_visible"] == (math.sin(45 * 0.3) > 0)
        assert caption.props["caret_visible"] is True

    def test_no_caption_before_start(self, productions):
        result = productions.render("BrickByBrick", 20)
        assert not result.is_empty
        assert result.errors == []
        assert result.tree.find("text_reveal") is None
        assert result.tree.find("figure") is not None

    def test_scene1_fades_in(self, productions):
        first = productions.render("BrickByBrick", 0).tree.find("scene1_layers")
        assert first.props["style"] == {"opacity": 0}
        later = productions.render("BrickByBrick", 60).tree.find("scene1_layers")
        assert later.props["style"] == {"opacity": 1}

    def test_outside_composition(self, productions):
        for frame in (-1, 840, 5000):
            assert productions.render("BrickByBrick", frame).is_empty

    def test_montage_cuts(self, productions):
        tree = productions.render("BrickByBrick", 435 + 26).tree
        assert tree.find("cut1") is None
        assert tree.find("cut2").props["frame"] == 0

        tree = productions.render("BrickByBrick", 435 + 80).tree
        assert tree.find("cut4_layers").props["style"] == {"blur": pytest.approx(4.2)}

    def test_brand_reveal(self, productions):
        tree = productions.render("BrickByBrick", 790).tree
        assert tree.find("brand_reveal") is not None
        assert tree.find("tagline").props["opacity"] == 0

    def test_seek_idempotent(self, productions):
        a = productions.render("BrickByBrick", 400).to_dict()
        productions.render("BrickByBrick", 12)
        productions.render("BrickByBrick", 777)
        assert productions.render("BrickByBrick", 400).to_dict() == a

    @pytest.mark.slow
    def test_every_frame_renders_cleanly(self, productions):
        for frame in range(0, 840):
            result = productions.render("BrickByBrick", frame)
            assert result.tree is not None
            assert result.errors == []


class TestBrandOSPromo:
    def test_registration(self, productions):
        config = productions.get("BrandOSPromo").config
        assert config.duration_in_frames == 810
        assert (config.width, config.height) == (1080, 1080)

    def test_hook_has_no_fade_in(self, productions):
        tree = productions.render("BrandOSPromo", 0).tree
        assert tree.find("hook").props["style"] == {"opacity": 1.0}
        assert tree.find("problem") is None

    def test_scene_fades(self, productions):
        tree = productions.render("BrandOSPromo", 95).tree
        assert tree.find("problem").props["style"]["opacity"] == pytest.approx(0.5)

    def test_score_counts_to_target(self, productions):
        tree = productions.render("BrandOSPromo", 480 + 60).tree
        assert tree.find("score_counter").props["value"] == 87

    def test_custom_props(self):
        composer = brandos_promo.build(brandos_promo.PromoProps(brand_score=42, handle="@someone"))
        composition = composer.composition()
        assert composition.render(540).tree.find("score_counter").props["value"] == 42
        handle = composition.render(300 + 40).tree.find("handle")
        assert handle.props["text"] == "@someone"

    def test_props_validated(self):
        with pytest.raises(ValidationError):
            brandos_promo.PromoProps(brand_score=101)

    def test_logo_without_resolver(self, productions):
        image = productions.render("BrandOSPromo", 250).tree.find("image")
        assert image.props["src"] == "brandos/mark.svg"
        assert image.props["resolved"] is None

    def test_logo_with_resolver(self):
        registry = build_registry(assets=AssetResolver(f"{BASE}/public"))
        image = registry.render("BrandOSPromo", 250).tree.find("image")
        assert image.props["resolved"].endswith("mark.svg")

    def test_missing_logo_is_reported(self, tmp_path):
        registry = build_registry(assets=AssetResolver(tmp_path))
        result = registry.render("BrandOSPromo", 250)
        assert len(result.errors) == 1
        error = result.errors[0]
        assert isinstance(error.error, MissingAssetReferenceError)
        assert error.path == ("BrandOSPromo", "logo", "logo_layers", "image")
        assert result.tree.find("wordmark") is not None

    @pytest.mark.slow
    def test_every_frame_renders_cleanly(self, productions):
        for frame in range(0, 810):
            result = productions.render("BrandOSPromo", frame)
            assert result.tree is not None
            assert result.errors == []


class TestRegisterAll:
    def test_all_productions_registered(self, productions):
        assert productions.ids() == sorted(PRODUCTIONS)

    def test_existing_ids_skipped(self, small_composer):
        registry = CompositionRegistry()
        registry.register(small_composer)
        register_all(registry)
        assert registry.ids() == sorted(["Small", *PRODUCTIONS])
        register_all(registry)
        assert len(registry) == 3

    def test_schedules_dir(self, tmp_path):
        for module in PRODUCTIONS.values():
            shutil.copy(Paths.schedule(module.SCHEDULE_NAME), tmp_path / f"{module.SCHEDULE_NAME}.json")
        registry = build_registry(schedules_dir=tmp_path)
        assert registry.get("BrickByBrick").duration_in_frames == 840

    def test_missing_schedules_dir(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            build_registry(schedules_dir=tmp_path / "nowhere")
