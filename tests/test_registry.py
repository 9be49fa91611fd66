"""Tests for application discovery."""

import pytest

from ddev_tools import docker
from ddev_tools.app import LocalApp
from ddev_tools.registry import DEFAULT_KINDS, get_active_app, get_apps
from ddev_tools.utils import AppNotFoundError, ConfigNotFoundError, DockerError


def test_queries_web_containers_with_platform_label(fake_docker):
    get_apps()

    assert fake_docker.calls == [
        ("find", {"com.ddev.platform": "ddev", "com.docker.compose.service": "web"}),
    ]


def test_no_containers_gives_empty_mapping(fake_docker):
    assert get_apps() == {}


def test_initialized_apps_in_runtime_order(fake_docker, make_app_root):
    second = make_app_root("second")
    first = make_app_root("first")
    fake_docker.add_site_container("second", "web", approot=second)
    fake_docker.add_site_container("second", "db", approot=second)
    fake_docker.add_site_container("first", "web", approot=first)

    apps = get_apps()

    assert list(apps) == ["local"]
    assert [app.name for app in apps["local"]] == ["second", "first"]
    assert all(not app.is_degraded for app in apps["local"])


def test_container_without_approot_is_skipped(fake_docker, make_app_root):
    root = make_app_root("good")
    fake_docker.add_site_container("legacy", "web", approot=None)
    fake_docker.add_site_container("good", "web", approot=root)

    apps = get_apps()

    assert [app.name for app in apps["local"]] == ["good"]


def test_deleted_config_recovers_from_labels(fake_docker, make_app_root):
    root = make_app_root("proj", name="site1", app_type="wordpress")
    fake_docker.add_site_container("site1", "web", approot=root, app_type="wordpress")
    (root / ".ddev" / "config.yaml").unlink()

    apps = get_apps()

    app = apps["local"][0]
    assert app.is_degraded
    assert app.name == "site1"
    assert app.app_type == "wordpress"
    assert app.app_root == str(root)


def test_missing_root_directory_recovers_from_labels(fake_docker, tmp_path):
    fake_docker.add_site_container("vanished", "web", approot=tmp_path / "gone", app_type="drupal7")

    app = get_apps()["local"][0]

    assert app.is_degraded
    assert (app.name, app.app_type) == ("vanished", "drupal7")


def test_query_failure_drops_only_that_kind(fake_docker, monkeypatch):
    class OtherApp(LocalApp):
        pass

    fake_docker.add_site_container("site1", "web", approot="/srv/site1")
    queries = []

    def flaky_find(labels):
        queries.append(labels)
        if len(queries) == 1:
            raise DockerError("Cannot connect to the Docker daemon")
        return fake_docker.find_containers_by_labels(labels)

    monkeypatch.setattr(docker, "find_containers_by_labels", flaky_find)

    apps = get_apps({"broken": LocalApp, "local": OtherApp})

    assert len(queries) == 2
    assert "broken" not in apps
    assert [app.name for app in apps["local"]] == ["site1"]
    assert isinstance(apps["local"][0], OtherApp)


def test_default_kinds_table():
    assert DEFAULT_KINDS == {"local": LocalApp}


def test_get_active_app_by_name(fake_docker, make_app_root):
    root = make_app_root("site2")
    fake_docker.add_site_container("site2", "web", approot=root)

    assert get_active_app("site2").app_root == str(root)


def test_get_active_app_unknown_name(fake_docker):
    with pytest.raises(AppNotFoundError, match="nosuch"):
        get_active_app("nosuch")


def test_get_active_app_from_cwd(make_app_root, monkeypatch):
    root = make_app_root("proj", name="here")
    (root / "web").mkdir()
    monkeypatch.chdir(root / "web")

    assert get_active_app().name == "here"


def test_get_active_app_without_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ConfigNotFoundError):
        get_active_app()


def test_undecodable_config_degrades_without_aborting(fake_docker, make_app_root):
    bad = make_app_root("bad")
    good = make_app_root("good")
    (bad / ".ddev" / "config.yaml").write_bytes(b"name: \xff\xfe bad\n")
    fake_docker.add_site_container("bad", "web", approot=bad)
    fake_docker.add_site_container("good", "web", approot=good)

    apps = get_apps()["local"]

    assert [app.name for app in apps] == ["bad", "good"]
    assert apps[0].is_degraded
    assert not apps[1].is_degraded


def test_unrecoverable_container_is_skipped(fake_docker, make_app_root, tmp_path):
    good = make_app_root("good")
    nameless = fake_docker.add_site_container("nameless", "web", approot=tmp_path / "gone")
    del nameless.labels["com.ddev.site-name"]
    fake_docker.add_site_container("good", "web", approot=good)

    apps = get_apps()["local"]

    assert [app.name for app in apps] == ["good"]
