"""
Unit Tests for the Layered SEO Configuration Provider

Covers layer precedence (runtime > DB > env > disk > defaults), layer
discards, edge mode and the disk/DB caches.
"""

import asyncio
import json
import logging
from datetime import datetime

import pytest

from livescore_seo.domain.entities.seo_store import SeoStore
from livescore_seo.domain.exceptions import ConfigLayerError, InvalidRuntimeStoreError
from livescore_seo.infrastructure.config.disk_layer import DiskConfigLayer, read_json_file
from livescore_seo.infrastructure.config.seo_store_provider import SeoConfigProvider, normalize_patch_assets
from livescore_seo.infrastructure.config.settings import SeoStoreSettings


def write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def config_dir(tmp_path):
    directory = tmp_path / "seo-config"
    directory.mkdir()
    return directory


def make_provider(tmp_path, clock, repository=None, **overrides):
    settings = SeoStoreSettings(cwd=str(tmp_path), **overrides)
    return SeoConfigProvider(settings=settings, repository=repository, clock=clock)


class TestSettings:
    """Tests for environment-backed settings."""

    def test_defaults(self, tmp_path):
        settings = SeoStoreSettings(cwd=str(tmp_path))
        assert settings.store_dir is None
        assert settings.edge_runtime is False
        assert settings.db_override_enabled is True
        assert settings.db_cache_ms == 500
        assert settings.key_global == "livesoccerr"
        assert settings.key_player == "livesoccerr_player"

    def test_reads_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SEO_RUNTIME", "edge")
        monkeypatch.setenv("SEO_DB_OVERRIDE", "0")
        monkeypatch.setenv("SEO_DB_CACHE_MS", "250")
        monkeypatch.setenv("SEO_DB_KEY_MATCH", "custom_match")
        settings = SeoStoreSettings(cwd=str(tmp_path))
        assert settings.edge_runtime is True
        assert settings.db_override_enabled is False
        assert settings.db_cache_ms == 250
        assert settings.key_match == "custom_match"

    def test_invalid_number_falls_back(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SEO_DB_CACHE_MS", "fast")
        assert SeoStoreSettings(cwd=str(tmp_path)).db_cache_ms == 500


class TestDiskLayer:
    """Tests for the disk configuration layer."""

    def test_read_missing_and_empty_files(self, tmp_path):
        assert read_json_file(str(tmp_path / "missing.json")) is None
        empty = tmp_path / "empty.json"
        empty.write_text("   ", encoding="utf-8")
        assert read_json_file(str(empty)) is None

    def test_read_invalid_json_raises(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigLayerError):
            read_json_file(str(bad))

    def test_read_non_object_raises(self, tmp_path):
        bad = tmp_path / "list.json"
        bad.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigLayerError, match="object"):
            read_json_file(str(bad))

    def test_resolve_dir_prefers_explicit_directory(self, tmp_path):
        explicit = tmp_path / "custom"
        write_json(explicit / "seo-store.global.json", {})
        write_json(tmp_path / "seo-config" / "seo-store.global.json", {})
        layer = DiskConfigLayer("custom", str(tmp_path))
        assert layer.resolve_dir() == str(explicit)

    def test_resolve_dir_falls_through_candidates(self, tmp_path):
        write_json(tmp_path / "seo" / "seo-store.match.json", {})
        layer = DiskConfigLayer(None, str(tmp_path))
        assert layer.resolve_dir() == str(tmp_path / "seo")

    def test_resolve_dir_default_when_nothing_found(self, tmp_path):
        layer = DiskConfigLayer(None, str(tmp_path))
        assert layer.resolve_dir() == str(tmp_path / "seo-config")

    def test_signature_tracks_file_changes(self, config_dir, tmp_path):
        layer = DiskConfigLayer(None, str(tmp_path))
        before = layer.signature(str(config_dir))
        assert "missing" in before
        write_json(config_dir / "seo-store.global.json", {"brand": {"siteName": "X"}})
        assert layer.signature(str(config_dir)) != before

    def test_legal_patch_uses_seo_object_only(self, config_dir, tmp_path):
        write_json(config_dir / "seo-page.privacy-policy.json", {
            "seo": {"title": "Privacy"},
            "content": {"body": "ignored"},
        })
        layer = DiskConfigLayer(None, str(tmp_path))
        assert layer.load_legal_patch(str(config_dir)) == {"pages": {"privacyPolicy": {"title": "Privacy"}}}


class TestPrecedence:
    """Tests for layer precedence."""

    def test_compiled_defaults(self, tmp_path, clock):
        store = make_provider(tmp_path, clock).get_sync_snapshot()
        assert store.brand.site_name == "Live Score"
        assert store.brand.site_url == "https://livesoccerr.com"
        assert store.match.api_timeout_ms == 650
        assert len(store.match.title_patterns) == 3
        assert store.pages["contact"].h1 == "Contact Us"

    def test_site_url_from_environment(self, tmp_path, clock, monkeypatch):
        monkeypatch.setenv("SITE_URL", "https://staging.example.com/")
        store = make_provider(tmp_path, clock).get_sync_snapshot()
        assert store.brand.site_url == "https://staging.example.com"

    def test_disk_overrides_defaults(self, tmp_path, clock, config_dir):
        write_json(config_dir / "seo-store.global.json", {"brand": {"siteName": "Disk Score"}})
        store = make_provider(tmp_path, clock).get_sync_snapshot()
        assert store.brand.site_name == "Disk Score"
        assert store.brand.locale == "en_US"

    def test_later_store_files_win(self, tmp_path, clock, config_dir):
        write_json(config_dir / "seo-store.global.json", {"brand": {"siteName": "Global", "tagline": "G"}})
        write_json(config_dir / "seo-store.match.json", {"brand": {"siteName": "Match"}})
        store = make_provider(tmp_path, clock).get_sync_snapshot()
        assert store.brand.site_name == "Match"
        assert store.brand.tagline == "G"

    def test_legal_page_files_patch_pages(self, tmp_path, clock, config_dir):
        write_json(config_dir / "seo-page.contact.json", {"seo": {"title": "Reach us"}})
        store = make_provider(tmp_path, clock).get_sync_snapshot()
        assert store.pages["contact"].title == "Reach us"
        assert store.pages["contact"].h1 == "Contact Us"

    def test_env_overrides_disk(self, tmp_path, clock, config_dir):
        write_json(config_dir / "seo-store.global.json", {"brand": {"siteName": "Disk", "tagline": "T"}})
        provider = make_provider(tmp_path, clock, config_json=json.dumps({"brand": {"siteName": "Env"}}))
        store = provider.get_sync_snapshot()
        assert store.brand.site_name == "Env"
        assert store.brand.tagline == "T"

    def test_arrays_replaced_not_concatenated(self, tmp_path, clock):
        provider = make_provider(tmp_path, clock, config_json=json.dumps({
            "match": {"titlePatterns": ["{home} v {away}"]},
        }))
        assert provider.get_sync_snapshot().match.title_patterns == ["{home} v {away}"]

    def test_db_overrides_env(self, tmp_path, clock, repository):
        repository.put("global", "livesoccerr", {"brand": {"siteName": "DB"}})
        provider = make_provider(
            tmp_path, clock, repository,
            config_json=json.dumps({"brand": {"siteName": "Env", "tagline": "from env"}}),
        )
        store = asyncio.run(provider.get_async_snapshot())
        assert store.brand.site_name == "DB"
        assert store.brand.tagline == "from env"
        # The sync snapshot never includes the DB layer
        assert provider.get_sync_snapshot().brand.site_name == "Env"

    def test_db_records_merge_in_fixed_order(self, tmp_path, clock, repository):
        repository.put("global", "livesoccerr", {"brand": {"siteName": "Global"}, "match": {"apiTimeoutMs": 900}})
        repository.put("match", "livesoccerr_match", {"match": {"apiTimeoutMs": 1100}})
        repository.put("player", "livesoccerr_player", {"brand": {"siteName": "Player"}})
        store = asyncio.run(make_provider(tmp_path, clock, repository).get_async_snapshot())
        assert store.match.api_timeout_ms == 1100
        assert store.brand.site_name == "Player"

    def test_runtime_store_short_circuits_everything(self, tmp_path, clock, config_dir, repository):
        write_json(config_dir / "seo-store.global.json", {"brand": {"tagline": "disk tagline"}})
        repository.put("global", "livesoccerr", {"brand": {"siteName": "DB"}})
        provider = make_provider(tmp_path, clock, repository, config_json=json.dumps({"brand": {"siteName": "Env"}}))

        previous = provider.swap({"brand": {"siteName": "Runtime"}})
        assert previous is None

        sync_store = provider.get_sync_snapshot()
        async_store = asyncio.run(provider.get_async_snapshot())
        assert sync_store is async_store
        assert sync_store.brand.site_name == "Runtime"
        assert sync_store.brand.tagline == "Soccer Scores. Right Now."
        assert repository.record_calls == 0

        assert provider.swap(None) is sync_store
        assert provider.get_sync_snapshot().brand.site_name == "Env"

    def test_swap_accepts_store_instance(self, tmp_path, clock):
        provider = make_provider(tmp_path, clock)
        store = SeoStore()
        provider.swap(store)
        assert provider.get_sync_snapshot() is store

    def test_swap_rejects_invalid_store(self, tmp_path, clock):
        provider = make_provider(tmp_path, clock)
        with pytest.raises(InvalidRuntimeStoreError):
            provider.swap({"match": {"apiTimeoutMs": "whenever"}})
        with pytest.raises(InvalidRuntimeStoreError):
            provider.swap(["not", "a", "store"])
        assert provider.runtime_store is None

    def test_unknown_brand_keys_preserved(self, tmp_path, clock, config_dir):
        write_json(config_dir / "seo-store.global.json", {
            "brand": {"faviconUrl": "/icons/fav.ico", "themeColor": "#0a0", "supportEmail": "hi@example.com"},
        })
        store = make_provider(tmp_path, clock).get_sync_snapshot()
        assert store.brand.favicon_url == "/icons/fav.ico"
        assert store.brand.theme_color == "#0a0"
        assert store.to_layer()["brand"]["supportEmail"] == "hi@example.com"


class TestLayerDiscards:
    """Tests for corrupt and schema-invalid layers."""

    def test_bad_json_file_is_skipped(self, tmp_path, clock, config_dir, caplog):
        (config_dir / "seo-store.global.json").write_text("{oops", encoding="utf-8")
        write_json(config_dir / "seo-store.match.json", {"brand": {"siteName": "Match"}})
        with caplog.at_level(logging.WARNING):
            store = make_provider(tmp_path, clock).get_sync_snapshot()
        assert store.brand.site_name == "Match"
        assert "seo-store.global.json" in caplog.text

    def test_invalid_env_json_is_ignored(self, tmp_path, clock, caplog):
        with caplog.at_level(logging.WARNING):
            store = make_provider(tmp_path, clock, config_json="{nope").get_sync_snapshot()
        assert store.brand.site_name == "Live Score"
        assert "SEO_CONFIG_JSON" in caplog.text

    def test_schema_invalid_layer_is_discarded(self, tmp_path, clock, config_dir, caplog):
        write_json(config_dir / "seo-store.global.json", {"brand": {"siteName": "Disk"}})
        provider = make_provider(tmp_path, clock, config_json=json.dumps({"match": {"apiTimeoutMs": "slow"}}))
        with caplog.at_level(logging.WARNING):
            store = provider.get_sync_snapshot()
        assert store.brand.site_name == "Disk"
        assert store.match.api_timeout_ms == 650
        assert "env" in caplog.text

    def test_schema_invalid_db_patch_falls_back_to_base(self, tmp_path, clock, repository):
        repository.put("global", "livesoccerr", {"league": {"titlePatterns": "not a list"}})
        provider = make_provider(tmp_path, clock, repository)
        store = asyncio.run(provider.get_async_snapshot())
        assert store.league.title_patterns == SeoStore().league.title_patterns

    def test_non_object_db_record_is_ignored(self, tmp_path, clock, repository):
        repository.put("global", "livesoccerr", ["unexpected"])
        repository.put("match", "livesoccerr_match", {"brand": {"siteName": "Match"}})
        store = asyncio.run(make_provider(tmp_path, clock, repository).get_async_snapshot())
        assert store.brand.site_name == "Match"


class TestEdgeMode:
    """Tests for edge mode (defaults + env only)."""

    def test_disk_and_db_skipped(self, tmp_path, clock, config_dir, repository):
        write_json(config_dir / "seo-store.global.json", {"brand": {"siteName": "Disk"}})
        repository.put("global", "livesoccerr", {"brand": {"siteName": "DB"}})
        provider = make_provider(
            tmp_path, clock, repository,
            edge_runtime=True,
            config_json=json.dumps({"brand": {"tagline": "edge"}}),
        )
        store = asyncio.run(provider.get_async_snapshot())
        assert store.brand.site_name == "Live Score"
        assert store.brand.tagline == "edge"
        assert repository.record_calls == 0


class TestCaching:
    """Tests for the disk and DB caches."""

    def test_disk_snapshot_reused_while_unchanged(self, tmp_path, clock, config_dir):
        write_json(config_dir / "seo-store.global.json", {"brand": {"siteName": "Disk"}})
        provider = make_provider(tmp_path, clock)
        first = provider.get_sync_snapshot()
        assert provider.get_sync_snapshot() is first

    def test_disk_change_picked_up_immediately(self, tmp_path, clock, config_dir):
        path = config_dir / "seo-store.global.json"
        write_json(path, {"brand": {"siteName": "One"}})
        provider = make_provider(tmp_path, clock)
        assert provider.get_sync_snapshot().brand.site_name == "One"
        write_json(path, {"brand": {"siteName": "Second value"}})
        assert provider.get_sync_snapshot().brand.site_name == "Second value"

    def test_disk_snapshot_rebuilt_after_window(self, tmp_path, clock, config_dir):
        write_json(config_dir / "seo-store.global.json", {"brand": {"siteName": "Disk"}})
        provider = make_provider(tmp_path, clock)
        first = provider.get_sync_snapshot()
        clock.advance(1.5)
        second = provider.get_sync_snapshot()
        assert second is not first
        assert second == first

    def test_db_patch_cached_within_ttl(self, tmp_path, clock, repository):
        repository.put("global", "livesoccerr", {"brand": {"siteName": "DB"}})
        provider = make_provider(tmp_path, clock, repository)
        first = asyncio.run(provider.get_async_snapshot())
        calls = repository.record_calls
        assert calls == 4
        second = asyncio.run(provider.get_async_snapshot())
        assert repository.record_calls == calls
        assert second is first

    def test_db_patch_reused_when_signature_unchanged(self, tmp_path, clock, repository):
        repository.put("global", "livesoccerr", {"brand": {"siteName": "DB"}})
        provider = make_provider(tmp_path, clock, repository)
        first_patch = asyncio.run(provider.load_db_patch())
        clock.advance(0.6)
        second_patch = asyncio.run(provider.load_db_patch())
        assert repository.record_calls == 8
        assert second_patch is first_patch

    def test_db_edit_visible_after_ttl(self, tmp_path, clock, repository):
        repository.put("global", "livesoccerr", {"brand": {"siteName": "Before"}})
        provider = make_provider(tmp_path, clock, repository)
        assert asyncio.run(provider.get_async_snapshot()).brand.site_name == "Before"

        repository.put("global", "livesoccerr", {"brand": {"siteName": "After"}}, updated_at=datetime(2024, 6, 1))
        assert asyncio.run(provider.get_async_snapshot()).brand.site_name == "Before"
        clock.advance(0.6)
        assert asyncio.run(provider.get_async_snapshot()).brand.site_name == "After"

    def test_zero_ttl_reads_db_every_time(self, tmp_path, clock, repository):
        repository.put("global", "livesoccerr", {"brand": {"siteName": "DB"}})
        provider = make_provider(tmp_path, clock, repository, db_cache_ms=0)
        asyncio.run(provider.get_async_snapshot())
        asyncio.run(provider.get_async_snapshot())
        assert repository.record_calls == 8

    def test_invalidate_drops_db_patch(self, tmp_path, clock, repository):
        repository.put("global", "livesoccerr", {"brand": {"siteName": "DB"}})
        provider = make_provider(tmp_path, clock, repository)
        asyncio.run(provider.get_async_snapshot())
        provider.invalidate()
        asyncio.run(provider.get_async_snapshot())
        assert repository.record_calls == 8


class TestDatabaseLayer:
    """Tests for DB keys, failures and asset normalization."""

    def test_failure_degrades_to_base_snapshot(self, tmp_path, clock, repository, caplog):
        repository.fail = True
        provider = make_provider(tmp_path, clock, repository, config_json=json.dumps({"brand": {"siteName": "Env"}}))
        with caplog.at_level(logging.ERROR):
            store = asyncio.run(provider.get_async_snapshot())
        assert store.brand.site_name == "Env"
        assert "Failed to load SEO DB override patch" in caplog.text

    def test_failure_is_cached_for_ttl(self, tmp_path, clock, repository):
        repository.fail = True
        provider = make_provider(tmp_path, clock, repository)
        asyncio.run(provider.get_async_snapshot())
        calls = repository.record_calls
        asyncio.run(provider.get_async_snapshot())
        assert repository.record_calls == calls

        repository.fail = False
        repository.put("global", "livesoccerr", {"brand": {"siteName": "Recovered"}})
        clock.advance(0.6)
        assert asyncio.run(provider.get_async_snapshot()).brand.site_name == "Recovered"

    def test_disabled_db_layer_is_never_queried(self, tmp_path, clock, repository):
        repository.put("global", "livesoccerr", {"brand": {"siteName": "DB"}})
        provider = make_provider(tmp_path, clock, repository, db_override_enabled=False)
        assert asyncio.run(provider.get_async_snapshot()).brand.site_name == "Live Score"
        assert repository.record_calls == 0

    def test_legacy_keys_are_fallbacks(self, tmp_path, clock, repository):
        repository.put("global", "default", {"brand": {"siteName": "Legacy"}})
        provider = make_provider(tmp_path, clock, repository)
        assert asyncio.run(provider.get_async_snapshot()).brand.site_name == "Legacy"

    def test_preferred_key_wins_over_fallbacks(self, tmp_path, clock, repository):
        repository.put("global", "default", {"brand": {"siteName": "Legacy"}})
        repository.put("global", "tenant", {"brand": {"siteName": "Tenant"}})
        provider = make_provider(tmp_path, clock, repository, key_global="tenant")
        assert asyncio.run(provider.get_async_snapshot()).brand.site_name == "Tenant"

    def test_record_keys(self, tmp_path, clock):
        provider = make_provider(tmp_path, clock, key_match="tenant_match")
        keys = dict(provider.record_keys())
        assert keys["match"] == ["tenant_match", "match", "default", "livesoccerr_match"]
        assert keys["global"] == ["livesoccerr", "global", "default"]

    def test_asset_paths_normalized(self, tmp_path, clock, repository):
        repository.put("global", "livesoccerr", {
            "brand": {"logoUrl": "brand/custom.svg", "defaultOgImage": "https://cdn.example.com/og.png"},
            "match": {"og": {"fallbackImage": "images/match.png"}},
        })
        store = asyncio.run(make_provider(tmp_path, clock, repository).get_async_snapshot())
        assert store.brand.logo_url == "/brand/custom.svg"
        assert store.brand.default_og_image == "https://cdn.example.com/og.png"
        assert store.match.og.fallback_image == "/images/match.png"

    def test_normalize_patch_assets_ignores_missing_sections(self):
        patch = {"home": {"title": "x"}}
        assert normalize_patch_assets(patch) == {"home": {"title": "x"}}
