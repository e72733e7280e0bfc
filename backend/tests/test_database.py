from database import LinkDB, LinkSettingsDB, init_database, link_table


def test_link_table_prefix():
    assert link_table("") == "lti_link"
    assert link_table("tsugi_") == "tsugi_lti_link"


def test_ensure_link_is_idempotent(db_path):
    assert LinkDB.ensure_link("abc", title="Intro", db_path=db_path) is True
    assert LinkDB.ensure_link("abc", title="Other", db_path=db_path) is False

    row = LinkDB.get_by_id("abc", db_path=db_path)
    assert row["title"] == "Intro"
    assert row["link_key"] == "abc"
    assert row["settings"] is None


def test_fetch_and_update_settings(db_path, link_id):
    settings_db = LinkSettingsDB(db_path)

    assert settings_db.fetch_settings(link_id) == (None,)
    assert settings_db.fetch_settings("missing") is None

    assert settings_db.update_settings(link_id, '{"a": 1}') == 1
    assert settings_db.fetch_settings(link_id) == ('{"a": 1}',)
    assert settings_db.update_settings("missing", "{}") == 0


def test_prefixed_table(tmp_path):
    path = str(tmp_path / "prefixed.db")
    init_database(path, prefix="tsugi_")
    LinkDB.ensure_link("p1", db_path=path, prefix="tsugi_")

    settings_db = LinkSettingsDB(path, prefix="tsugi_")
    settings_db.update_settings("p1", "{}")

    assert settings_db.table == "tsugi_lti_link"
    assert settings_db.fetch_settings("p1") == ("{}",)
    assert [row["link_id"] for row in LinkDB.list_links(db_path=path, prefix="tsugi_")] == ["p1"]


def test_delete_link(db_path, link_id):
    assert LinkDB.delete_link(link_id, db_path=db_path) is True
    assert LinkDB.get_by_id(link_id, db_path=db_path) is None
