import json

from blueprint.schema import Blueprint, Room, emit_blueprint_schema, parse_blueprint


def test_blueprint_schema_contains_core_fields(tmp_path):
    schema = Blueprint.model_json_schema()
    assert "rooms" in schema.get("properties", {})
    room_props = Room.model_json_schema()["properties"]
    for field in ("name", "x", "y", "width", "height"):
        assert field in room_props
    out = emit_blueprint_schema(str(tmp_path / "schema" / "blueprint.json"))
    loaded = json.loads(open(out, encoding="utf-8").read())
    assert loaded["$id"] == "blueprint.v1.json"
    assert "properties" in loaded


def test_parse_widens_integers_and_ignores_extra_fields():
    bp = parse_blueprint('{"rooms":[{"name":"Den","x":1,"y":2,"width":3,"height":4,"floor":2}],"v":1}')
    room = bp.rooms[0]
    assert isinstance(room.x, float) and room.x == 1.0
    assert room.name == "Den"
    assert not hasattr(room, "floor")
