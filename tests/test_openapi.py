"""Tests for the OpenAPI security annotations."""


def test_bearer_scheme_is_declared(app):
    schema = app.openapi()

    assert schema["components"]["securitySchemes"]["BearerAuth"]["scheme"] == "bearer"


def test_writes_are_protected_and_reads_public(app):
    paths = app.openapi()["paths"]

    assert paths["/restaurants"]["post"]["security"] == [{"BearerAuth": []}]
    assert paths["/restaurants"]["put"]["security"] == [{"BearerAuth": []}]
    assert paths["/restaurants/{restaurant_id}"]["delete"]["security"] == [{"BearerAuth": []}]
    assert paths["/profiles/{profile_id}"]["delete"]["security"] == [{"BearerAuth": []}]

    assert paths["/restaurants"]["get"]["security"] == []
    assert paths["/profiles"]["get"]["security"] == []
    assert paths["/auth"]["post"]["security"] == []
    assert paths["/health"]["get"]["security"] == []
