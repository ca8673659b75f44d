"""Serializers between the Request model and text formats.

- yaml_emitter: Request -> OpenCollection YAML
- yaml_reader: OpenCollection YAML -> Request
- bru_emitter: Request -> `.bru` source
"""

from bru_to_oc.converters.bru_emitter import BruEmitter, emit_source_format
from bru_to_oc.converters.yaml_emitter import EmitOptions, YamlEmitter, emit_yaml, needs_quoting
from bru_to_oc.converters.yaml_reader import YamlReader, parse_yaml

__all__ = [
    "BruEmitter",
    "EmitOptions",
    "YamlEmitter",
    "YamlReader",
    "emit_source_format",
    "emit_yaml",
    "needs_quoting",
    "parse_yaml",
]
