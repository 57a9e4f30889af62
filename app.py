import gradio as gr
from functools import partial

from order_card_engine.config import configure_logging, get_app_config, load_configured_fields
from order_card_engine.handlers_live import (
    assign_handler,
    florist_choices,
    load_orders,
    notes_handler,
    render_order_handler,
    status_handler,
)
from order_card_engine.handlers_preview import (
    MAPPING_HEADERS,
    fields_to_mapping_table,
    go_live_handler,
    load_field_config,
    load_label_tables,
    load_order_payload,
    preview_handler,
    regex_preset_handler,
)
from order_card_engine.records import OrderStatus
from order_card_engine.schema_utils import source_path_choices
from order_card_engine.transforms import REGEX_PRESETS

config = get_app_config()
configure_logging(config.log_level)
initial_fields = load_configured_fields(config)

STATUS_CHOICES = [s.value for s in OrderStatus]

# --- UI Definition ---
with gr.Blocks(title="Order Card Designer") as demo:
    gr.Markdown("# Order Card Designer")
    gr.Markdown("Map order data onto card fields, preview the result, and work live orders.")

    # State
    fields_state = gr.State(value=initial_fields)
    payload_state = gr.State()
    labels_state = gr.State()
    store_state = gr.State()

    with gr.Tab("Order Card Preview"):
        with gr.Row():
            # Left Panel: Inputs
            with gr.Column(scale=1):
                gr.Markdown("### 1. Import")
                fields_file = gr.File(label="Field Configuration", file_types=[".json"])
                payload_file = gr.File(label="Fetched Order (JSON)", file_types=[".json"])
                labels_file = gr.File(label="Label Tables (florists, difficulty, product types)", file_types=[".json"])
                product_text = gr.Textbox(
                    label="Product Labels (JSON)",
                    placeholder='{"labelNames": ["Hard"], "labelCategories": ["difficulty"]}',
                    lines=3,
                )
                status_msg = gr.Textbox(label="Status", interactive=False)

                gr.Markdown("### 2. Helpers")
                source_path_selector = gr.Dropdown(
                    label="Available Source Paths",
                    choices=source_path_choices(),
                    allow_custom_value=True,
                    interactive=True,
                    info="Copy a path into the Source Paths column.",
                )
                preset_selector = gr.Dropdown(
                    label="Regex Presets",
                    choices=list(REGEX_PRESETS),
                    value=None,
                    interactive=True,
                )
                preset_pattern = gr.Textbox(label="Preset Pattern", interactive=False)
                preset_info = gr.Textbox(label="Preset Description", interactive=False)

            # Right Panel: Mapping & Preview
            with gr.Column(scale=2):
                gr.Markdown("### 3. Field Mapping")
                gr.Markdown("Edit labels, visibility, source paths and extraction rules.")
                mapping_table = gr.Dataframe(
                    headers=MAPPING_HEADERS,
                    datatype=["str", "str", "bool", "str", "str", "str", "str"],
                    col_count=(len(MAPPING_HEADERS), "fixed"),
                    value=fields_to_mapping_table(initial_fields),
                    interactive=True,
                )

                gr.Markdown("### 4. Preview")
                preview_status = gr.Radio(choices=STATUS_CHOICES, value=STATUS_CHOICES[0], label="Preview Status")
                preview_btn = gr.Button("Preview Card")
                card_output = gr.Markdown()
                card_fields = gr.JSON(label="Card Fields")

                gr.Markdown("### 5. Go Live")
                output_filename = gr.Textbox(label="Output Filename", placeholder="order_card_fields.json")
                go_live_btn = gr.Button("Go Live", variant="primary")
                download_output = gr.File(label="Download Configuration")

        fields_file.upload(
            fn=load_field_config,
            inputs=[fields_file],
            outputs=[fields_state, mapping_table, status_msg],
        )

        payload_file.upload(
            fn=load_order_payload,
            inputs=[payload_file],
            outputs=[payload_state, source_path_selector, status_msg],
        )

        labels_file.upload(
            fn=load_label_tables,
            inputs=[labels_file],
            outputs=[labels_state, status_msg],
        )

        preset_selector.change(
            fn=regex_preset_handler,
            inputs=[preset_selector],
            outputs=[preset_pattern, preset_info],
        )

        preview_btn.click(
            fn=partial(preview_handler, acting_user_id=config.acting_user_id),
            inputs=[fields_state, mapping_table, payload_state, labels_state, product_text, preview_status],
            outputs=[card_output, card_fields, status_msg],
        )

        go_live_btn.click(
            fn=go_live_handler,
            inputs=[fields_state, mapping_table, output_filename],
            outputs=[download_output, status_msg],
        )

    with gr.Tab("Live Order Card"):
        with gr.Row():
            with gr.Column(scale=1):
                gr.Markdown("### 1. Load orders")
                orders_file = gr.File(label="Orders (JSON)", file_types=[".json"])
                order_selector = gr.Dropdown(label="Order", choices=[], interactive=True)
                live_status_msg = gr.Textbox(label="Status", interactive=False)

                gr.Markdown("### 2. Work the order")
                status_choice = gr.Radio(choices=STATUS_CHOICES, value=None, label="Set Status")
                florist_selector = gr.Dropdown(label="Florist", choices=florist_choices(None), interactive=True)
                notes_box = gr.Textbox(label="Notes", lines=4)
                save_notes_btn = gr.Button("Save Notes")

            with gr.Column(scale=2):
                live_card = gr.Markdown()
                live_fields = gr.JSON(label="Card Fields")

        live_outputs = [live_card, live_fields, notes_box, live_status_msg]

        orders_file.upload(
            fn=load_orders,
            inputs=[orders_file],
            outputs=[store_state, order_selector, live_status_msg],
        )

        labels_state.change(
            fn=lambda labels: gr.update(choices=florist_choices(labels)),
            inputs=[labels_state],
            outputs=[florist_selector],
        )

        order_selector.change(
            fn=render_order_handler,
            inputs=[store_state, order_selector, fields_state, labels_state],
            outputs=[live_card, live_fields, notes_box],
        )

        status_choice.input(
            fn=partial(status_handler, acting_user_id=config.acting_user_id),
            inputs=[store_state, order_selector, status_choice, fields_state, labels_state],
            outputs=live_outputs,
        )

        florist_selector.input(
            fn=partial(assign_handler, acting_user_id=config.acting_user_id),
            inputs=[store_state, order_selector, florist_selector, fields_state, labels_state],
            outputs=live_outputs,
        )

        save_notes_btn.click(
            fn=partial(notes_handler, acting_user_id=config.acting_user_id),
            inputs=[store_state, order_selector, notes_box, fields_state, labels_state],
            outputs=live_outputs,
        )

if __name__ == "__main__":
    demo.launch()
