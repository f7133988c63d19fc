#!/usr/bin/env python
"""
Emit the versioned JSON Schema for Blueprint to schema/blueprint.v1.json
"""
import os
import sys

from blueprint.schema import emit_blueprint_schema

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
OUT = os.path.join(ROOT, "schema", "blueprint.v1.json")

if __name__ == "__main__":
    out = emit_blueprint_schema(sys.argv[1] if len(sys.argv) > 1 else OUT)
    print(f"Wrote {out}")
