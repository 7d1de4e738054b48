from dataclasses import replace

import pytest

from invoice_manager.controller import Editing, InvoiceController, Listing, Previewing

from conftest import TODAY, MemoryInvoiceStore, RecordingNotifier, make_invoice


def test_loads_collection_once_at_start(controller: InvoiceController, store: MemoryInvoiceStore) -> None:
    assert store.load_calls == 1
    assert [invoice.id for invoice in controller.invoices] == ["inv-1", "inv-2"]
    assert controller.state == Listing()
    assert controller.active_invoice is None


def test_empty_store_starts_with_empty_list(notifier: RecordingNotifier) -> None:
    controller = InvoiceController(MemoryInvoiceStore(), notifier=notifier)

    assert controller.invoices == ()
    assert notifier.messages == []


def test_loaded_invoices_get_consistent_totals() -> None:
    stale = replace(make_invoice("inv-9"), total=0.0, due_amount=0.0)

    controller = InvoiceController(MemoryInvoiceStore([stale]))

    assert controller.invoices[0].total == 575
    assert controller.invoices[0].due_amount == 575


def test_new_invoice_opens_numbered_draft(controller: InvoiceController) -> None:
    assert controller.new_invoice() is True

    state = controller.state
    assert isinstance(state, Editing)
    assert state.draft.invoice_number == "#407"
    assert state.draft.issue_date == TODAY
    assert state.draft.total == 575
    assert len(controller.invoices) == 2


@pytest.mark.parametrize(
    "numbers, expected",
    [([], "#405"), (["INV-0009", "INV-0010"], "INV-0011"), (["#99", "draft"], "#100"), (["misc"], "#405")],
)
def test_next_invoice_number(numbers, expected) -> None:
    invoices = [make_invoice(f"inv-{idx}", number) for idx, number in enumerate(numbers)]

    assert InvoiceController(MemoryInvoiceStore(invoices)).next_invoice_number() == expected


def test_saving_new_draft_appends_and_persists(
    controller: InvoiceController, store: MemoryInvoiceStore, notifier: RecordingNotifier
) -> None:
    controller.new_invoice()
    draft = controller.active_invoice

    assert controller.save_invoice() is True

    assert len(controller.invoices) == 3
    assert controller.invoices[-1].id == draft.id
    assert [invoice.id for invoice in store.saved] == ["inv-1", "inv-2", draft.id]
    assert controller.state == Listing()
    assert notifier.messages == [("Invoice created successfully!", True)]


def test_saving_existing_invoice_replaces_it(
    controller: InvoiceController, store: MemoryInvoiceStore, notifier: RecordingNotifier
) -> None:
    controller.edit_invoice("inv-1")
    controller.set_field("billTo.name", "Globex")
    controller.set_field("paidAmount", 75)

    controller.save_invoice()

    assert len(controller.invoices) == 2
    saved = controller.get_invoice("inv-1")
    assert saved.bill_to.name == "Globex"
    assert saved.due_amount == 500
    assert controller.invoices[0].id == "inv-1"
    assert store.saved[0].bill_to.name == "Globex"
    assert notifier.messages == [("Invoice updated successfully!", True)]


def test_save_with_explicit_draft_recalculates(controller: InvoiceController) -> None:
    draft = replace(make_invoice("inv-3", "#500"), paid_amount=75.0)

    controller.save_invoice(draft)

    assert controller.get_invoice("inv-3").due_amount == 500


def test_save_outside_editing_is_ignored(controller: InvoiceController, store: MemoryInvoiceStore) -> None:
    assert controller.save_invoice() is False
    assert store.save_calls == 0


def test_failed_persist_is_reported(notifier: RecordingNotifier) -> None:
    store = MemoryInvoiceStore([make_invoice()], fail_saves=True)
    controller = InvoiceController(store, notifier=notifier)
    controller.new_invoice()

    controller.save_invoice()

    assert len(controller.invoices) == 2
    assert notifier.messages == [("Invoice could not be saved to disk.", False)]


def test_delete_removes_and_persists(
    controller: InvoiceController, store: MemoryInvoiceStore, notifier: RecordingNotifier
) -> None:
    assert controller.delete_invoice("inv-1") is True

    assert [invoice.id for invoice in controller.invoices] == ["inv-2"]
    assert controller.get_invoice("inv-1") is None
    assert [invoice.id for invoice in store.saved] == ["inv-2"]
    assert notifier.messages == [("Invoice deleted successfully!", True)]


def test_delete_unknown_id_is_noop(
    controller: InvoiceController, store: MemoryInvoiceStore, notifier: RecordingNotifier
) -> None:
    assert controller.delete_invoice("nope") is False

    assert len(controller.invoices) == 2
    assert store.save_calls == 0
    assert notifier.messages == []


def test_edit_unknown_invoice_stays_on_list(controller: InvoiceController) -> None:
    assert controller.edit_invoice("nope") is False
    assert controller.state == Listing()


def test_preview_from_list_and_back(controller: InvoiceController, store: MemoryInvoiceStore) -> None:
    assert controller.preview_invoice("inv-2") is True

    state = controller.state
    assert isinstance(state, Previewing)
    assert state.invoice.id == "inv-2"
    assert state.returns_to == Listing()
    assert controller.back_to_form() is False

    assert controller.back() is True
    assert controller.state == Listing()
    assert store.save_calls == 0


def test_preview_draft_and_return_to_form(controller: InvoiceController, store: MemoryInvoiceStore) -> None:
    controller.new_invoice()
    controller.set_field("notes", "Half up front")
    draft = controller.active_invoice

    assert controller.preview() is True
    assert controller.active_invoice == draft
    assert len(controller.invoices) == 2

    assert controller.back_to_form() is True
    assert controller.state == Editing(draft)
    assert store.save_calls == 0


def test_back_to_list_discards_draft(controller: InvoiceController) -> None:
    controller.new_invoice()

    assert controller.back_to_list() is True

    assert controller.state == Listing()
    assert len(controller.invoices) == 2


def test_edits_go_through_totals(controller: InvoiceController) -> None:
    controller.edit_invoice("inv-1")
    for path, value in [("discountPercent", 10), ("sgstPercent", 9), ("cgstPercent", 9)]:
        controller.set_field(path, value)

    assert controller.active_invoice.total == pytest.approx(610.65)
    assert controller.totals.taxable_amount == pytest.approx(517.5)


def test_line_item_intents(controller: InvoiceController) -> None:
    controller.edit_invoice("inv-1")
    first = controller.active_invoice.line_items[0].id

    assert controller.add_line_item() is True
    new_id = controller.active_invoice.line_items[-1].id
    assert controller.update_line_item(new_id, "unitPrice", 25) is True
    assert controller.update_line_item(new_id, "quantity", 2) is True
    assert controller.remove_line_item(first) is True

    draft = controller.active_invoice
    assert len(draft.line_items) == 2
    assert draft.total == 125


def test_removing_last_line_item_is_rejected() -> None:
    controller = InvoiceController(MemoryInvoiceStore([make_invoice(items=[(10.0, 1)])]))
    controller.edit_invoice("inv-1")
    only = controller.active_invoice.line_items[0].id

    assert controller.remove_line_item(only) is False

    assert len(controller.active_invoice.line_items) == 1
    assert isinstance(controller.state, Editing)


def test_rejected_edit_keeps_draft(controller: InvoiceController) -> None:
    controller.edit_invoice("inv-1")
    before = controller.active_invoice

    assert controller.set_field("discountPercent", 250) is False
    assert controller.update_line_item(before.line_items[0].id, "quantity", 0) is False

    assert controller.active_invoice == before


def test_edits_outside_editing_are_ignored(controller: InvoiceController) -> None:
    assert controller.set_field("notes", "x") is False
    assert controller.add_line_item() is False


def test_summary(controller: InvoiceController) -> None:
    summary = controller.summary()

    assert summary.count == 2
    assert summary.total_value == 1150
    assert summary.total_paid == 100
    assert summary.total_due == 1050
