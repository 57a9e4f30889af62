from __future__ import annotations

import os
import tempfile
from typing import Any, Dict, List, Optional

import gradio as gr

from .card import CardView, render_preview_card, simulate_preview_status, sample_order
from .fields import DEFAULT_FIELDS, FieldConfigError, FieldDefinition, fields_to_json, get_field, load_fields
from .io_utils import read_json_content, read_optional_json
from .labels import LabelIndex
from .schema_utils import source_path_choices
from .transforms import REGEX_PRESETS

MAPPING_HEADERS = ["Field", "Label", "Visible", "Type", "Source Paths", "Transformation", "Pattern"]


def fields_to_mapping_table(fields: List[FieldDefinition]) -> List[List[Any]]:
    return [
        [
            f.id,
            f.label,
            f.visible,
            f.kind.value,
            ", ".join(f.source_paths),
            f.transformation.kind.value,
            f.transformation.pattern or "",
        ]
        for f in fields
    ]


def _table_rows(mapping_df) -> List[List[Any]]:
    if mapping_df is None:
        return []
    try:
        return mapping_df.values.tolist()
    except AttributeError:
        return [list(row) for row in mapping_df]


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "y")
    return bool(value)


def mapping_table_to_fields(mapping_df, base_fields: Optional[List[FieldDefinition]] = None) -> List[FieldDefinition]:
    """Rebuild field definitions from the edited mapping table.

    Columns the table does not show (category, icon, description) are kept from
    `base_fields`.
    """
    base_fields = base_fields or list(DEFAULT_FIELDS)
    out: List[FieldDefinition] = []
    for row in _table_rows(mapping_df):
        if not row or not str(row[0] or "").strip():
            continue
        row = list(row) + [""] * (len(MAPPING_HEADERS) - len(row))
        field_id = str(row[0]).strip()
        base = get_field(base_fields, field_id)
        data: Dict[str, Any] = base.to_dict() if base else {"id": field_id}
        data.update({
            "label": str(row[1] or field_id),
            "visible": _as_bool(row[2]),
            "type": str(row[3] or "text"),
            "sourcePaths": [p.strip() for p in str(row[4] or "").split(",") if p.strip()],
            "transformation": {"kind": str(row[5] or "none"), "pattern": str(row[6]) if row[6] else None},
        })
        out.append(FieldDefinition.from_dict(data))
    return out


def load_field_config(file_obj):
    if file_obj is None:
        fields = list(DEFAULT_FIELDS)
        return fields, fields_to_mapping_table(fields), "No file uploaded. Using the default fields."
    try:
        fields = load_fields(read_json_content(file_obj))
    except (ValueError, OSError) as e:
        return None, [], f"Error loading field configuration: {str(e)}"
    return fields, fields_to_mapping_table(fields), f"Loaded {len(fields)} fields."


def load_order_payload(file_obj):
    if file_obj is None:
        return None, gr.update(choices=source_path_choices()), "No order loaded. Previewing the sample order."
    try:
        payload = read_json_content(file_obj)
    except (ValueError, OSError) as e:
        return None, gr.update(choices=source_path_choices()), f"Error parsing JSON: {str(e)}"
    if isinstance(payload, dict) and isinstance(payload.get("order"), dict):
        payload = payload["order"]
    if not isinstance(payload, dict):
        return None, gr.update(choices=source_path_choices()), "Order payload must be a JSON object."

    choices = source_path_choices(payload)
    return payload, gr.update(choices=choices), f"Order loaded. Found {len(choices)} source paths."


def load_label_tables(file_obj):
    if file_obj is None:
        return None, "No label tables uploaded."
    try:
        data = read_json_content(file_obj)
        LabelIndex.from_dict(data)
    except (ValueError, OSError) as e:
        return None, f"Error loading label tables: {str(e)}"
    return data, "Label tables loaded."


def regex_preset_handler(preset_name):
    preset = REGEX_PRESETS.get(preset_name or "")
    if not preset:
        return "", ""
    return preset["pattern"], f"{preset['description']} (e.g. {preset['example']})"


def card_markdown(card: CardView) -> str:
    lines = [f"### {card.title or 'Not specified'}"]
    if card.variant_title:
        lines.append(f"*{card.variant_title}*")
    lines.append("")
    lines.append(f"- Status: **{card.status.value}**")
    lines.append(f"- Florist: {card.assignee_name}")
    if card.badge is not None:
        lines.append(f"- Label: {card.badge.name} ({card.badge.color})")
    return "\n".join(lines) + "\n"


def preview_handler(fields, mapping_df, payload, labels_data, product_text, preview_status, acting_user_id=None):
    try:
        edited = mapping_table_to_fields(mapping_df, fields) if _table_rows(mapping_df) else (fields or list(DEFAULT_FIELDS))
    except FieldConfigError as e:
        return "", None, f"Invalid field mapping: {str(e)}"
    try:
        product = read_optional_json(product_text)
    except ValueError as e:
        return "", None, f"Error parsing product labels: {str(e)}"
    if product is None and isinstance(payload, dict):
        product = payload.get("localProduct")

    labels = LabelIndex.from_dict(labels_data)
    order = simulate_preview_status(sample_order(labels), preview_status or "unassigned", labels, acting_user_id)
    card = render_preview_card(edited, labels, upstream_payload=payload, order=order, product=product)
    rows = [view.as_row() for view in card.fields]
    source = "fetched order" if payload is not None else "sample order"
    return card_markdown(card), rows, f"Previewed {len(rows)} fields from the {source}."


def go_live_handler(fields, mapping_df, file_name):
    try:
        edited = mapping_table_to_fields(mapping_df, fields)
    except FieldConfigError as e:
        return None, f"Invalid field mapping: {str(e)}"
    if not edited:
        return None, "No fields configured."

    if not file_name or not file_name.strip():
        file_name = "order_card_fields"
    if not file_name.lower().endswith(".json"):
        file_name += ".json"

    path = os.path.join(tempfile.gettempdir(), file_name)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(fields_to_json(edited))
    except OSError as e:
        return None, f"Error writing configuration: {str(e)}"
    return path, f"Configuration is live! Saved {len(edited)} fields to {path}"
