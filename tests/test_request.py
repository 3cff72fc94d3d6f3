from http import HTTPStatus

import pytest
from flask import jsonify, request
from werkzeug.datastructures import MultiDict

from forgequery import QueryComposer, mod_specification, mod_version_specification
from forgequery.request import parse_query_args


@pytest.fixture
def api(app, hub):
    @app.route("/api/mods")
    def mods():
        page = QueryComposer(mod_specification(), request.query_params).paginate(request.per_page, request.page)
        return jsonify(data=[{"id": mod.id, "name": mod.name} for mod in page.items], meta=page.meta())

    @app.route("/api/mods/<int:mod_id>/versions")
    def mod_versions(mod_id):
        versions = QueryComposer(mod_version_specification(mod_id), request.query_params).get()
        return jsonify(data=[version.version for version in versions])

    @app.route("/api/paging")
    def paging():
        return jsonify(page=request.page, per_page=request.per_page)

    return app.test_client()


def test_parse_query_args() -> None:
    args = MultiDict(
        {
            "filter[name]": "raid",
            "filter[spt_version]": "^3.8.0",
            "filter": "ignored",
            "include": "owner, authors",
            "fields": "name,detail_url",
            "sort": "-created_at,name",
            "query": "raid",
        }
    )

    params = parse_query_args(args)

    assert params.filters == {"name": "raid", "spt_version": "^3.8.0"}
    assert params.includes == ["owner", "authors"]
    assert params.fields == ["name", "detail_url"]
    assert params.sorts == ["-created_at", "name"]
    assert params.search == "raid"
    assert params.has_filter("spt_version")


def test_parse_query_args_keeps_any_filter_name() -> None:
    params = parse_query_args({"filter[spt-version]": "^3.8.0", "filter[]": "x"})

    assert params.filters == {"spt-version": "^3.8.0", "": "x"}


def test_parse_query_args_without_parameters() -> None:
    params = parse_query_args({})

    assert params.filters == {} and params.includes == [] and params.sorts == []
    assert params.search is None


def test_resource_request(api) -> None:
    query_string = {"filter[spt_version]": "^3.8.0", "sort": "-downloads", "per_page": "1", "query": "raid"}
    response = api.get("/api/mods", query_string=query_string)

    assert response.status_code == HTTPStatus.OK
    assert [mod["name"] for mod in response.json["data"]] == ["Raid Overhaul"]
    assert response.json["meta"] == {"current_page": 1, "last_page": 2, "per_page": 1, "total": 2}


def test_invalid_query_is_a_bad_request(api) -> None:
    response = api.get("/api/mods", query_string={"filter[color]": "red", "sort": "-color"})

    assert response.status_code == HTTPStatus.BAD_REQUEST
    error = response.json["errors"][0]
    assert error["code"] == "400"
    assert "Invalid filter(s): color" in error["detail"]


def test_malformed_filter_name_is_a_bad_request(api) -> None:
    response = api.get("/api/mods", query_string={"filter[spt-version]": "^3.8.0"})

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "Invalid filter(s): spt-version" in response.json["errors"][0]["detail"]


def test_non_numeric_ids_are_ignored(api, hub) -> None:
    response = api.get("/api/mods", query_string={"filter[id]": f"{hub.raid.id},--5"})

    assert response.status_code == HTTPStatus.OK
    assert [mod["name"] for mod in response.json["data"]] == ["Raid Overhaul"]


def test_invalid_sort_is_a_bad_request(api) -> None:
    response = api.get("/api/mods?sort=-color")

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "Invalid sort parameter(s): -color. Valid sorts are: id, name" in response.json["errors"][0]["title"]


def test_missing_parent_is_not_found(api) -> None:
    response = api.get("/api/mods/9999/versions")

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.json["errors"][0]["code"] == "404"


def test_page_size_is_clamped(api) -> None:
    assert api.get("/api/paging").json == {"page": 1, "per_page": 12}
    assert api.get("/api/paging?page=0&per_page=500").json == {"page": 1, "per_page": 50}
    assert api.get("/api/paging?page=3&per_page=0").json == {"page": 3, "per_page": 1}
