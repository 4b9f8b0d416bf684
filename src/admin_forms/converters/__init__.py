"""
Converters from form descriptions to rendered controls.

- form_builder: description -> FormTree compiler and default form
- controls: field type -> control dispatch
- temporal: composite date/time sub-controls
- nested: has-many rows and the new-record template
- error_binder: per-field error selection and messages
- behaviors: change-behaviour script aggregation
- description_loader: TOML form files
"""

from .behaviors import BehaviorAggregator, directive_script
from .controls import ControlDispatcher, ControlKind, resolve_control_kind
from .error_binder import bind_errors, error_message, error_messages
from .form_builder import FormDescription, build_form_tree, default_form_tree
from .nested import new_record_name
from .temporal import TemporalKind, build_temporal_controls, date_value, time_value

__all__ = [
    "BehaviorAggregator",
    "ControlDispatcher",
    "ControlKind",
    "FormDescription",
    "TemporalKind",
    "bind_errors",
    "build_form_tree",
    "build_temporal_controls",
    "date_value",
    "default_form_tree",
    "directive_script",
    "error_message",
    "error_messages",
    "new_record_name",
    "resolve_control_kind",
    "time_value",
]
