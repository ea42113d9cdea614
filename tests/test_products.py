import pytest

from catalog.products.models import Product, ProductPatch, ProductPayload, apply_patch, toggled_status
from catalog.products.viewmodels import (
    ADMIN_ONLY_MESSAGE,
    AUTO_CONFIRM_DELETE_KEY,
    ProductsViewModel,
    build_product_payload,
)
from catalog.utils.exceptions import ApiError, ValidationError
from mock_api.db import SEED_DATA


def _payload(name: str = "Cadeira Gamer", **overrides) -> ProductPayload:
    fields = {
        "name": name,
        "price": 1999,
        "image": "https://example.com/cadeira.png",
        "description": "Cadeira ergonômica para escritório",
    }
    fields.update(overrides)
    return ProductPayload(**fields)


def test_apply_patch_only_touches_set_fields():
    record = {"id": 7, "name": "Mouse", "price": 150, "image": "", "description": "sem fio", "status": "activated"}
    patched = apply_patch(record, ProductPatch(status="disabled"))
    assert patched == {**record, "status": "disabled"}
    assert record["status"] == "activated"


def test_apply_patch_never_changes_id():
    record = {"id": 7, "name": "Mouse", "price": 150}
    patch = ProductPatch.model_validate({"id": 99, "name": "Mouse Pro"})
    assert apply_patch(record, patch) == {"id": 7, "name": "Mouse Pro", "price": 150}


def test_toggled_status():
    assert toggled_status("activated") == "disabled"
    assert toggled_status("disabled") == "activated"


def test_build_product_payload_validation():
    assert build_product_payload(name=" Cadeira ", price=10).name == "Cadeira"
    with pytest.raises(ValidationError):
        build_product_payload(name="  ", price=10)
    with pytest.raises(ValidationError):
        build_product_payload(name="Cadeira", price=-5)


def test_products_empty_when_logged_out(context, recorder):
    vm = ProductsViewModel(context)
    assert vm.products == []
    assert vm.query_key == ("products", "guest")
    assert recorder.calls == []


def test_admin_sees_seed_fixtures(context, login_as):
    login_as("admin@test.com")
    vm = ProductsViewModel(context)

    assert vm.is_admin is True
    assert [p.model_dump() for p in vm.products] == [
        Product.model_validate(p).model_dump() for p in SEED_DATA["admin"]["products"]
    ]
    assert [p.name for p in vm.active_products] == ["Notebook"]
    assert [p.name for p in vm.inactive_products] == ["Monitor"]


def test_products_are_cached_until_invalidated(context, recorder, login_as):
    login_as("admin@test.com")
    vm = ProductsViewModel(context)

    vm.products
    vm.products
    assert recorder.calls_with("GET") == ["http://testserver/admin/products"]

    vm.refresh()
    assert len(recorder.calls_with("GET")) == 2


def test_admin_full_lifecycle(context, recorder, login_as):
    login_as("admin@test.com")
    vm = ProductsViewModel(context)
    before = vm.products

    created = vm.create_product(_payload())
    assert created.id == max(p.id for p in before) + 1
    assert created.status == "activated"
    assert "http://testserver/admin/products" in recorder.calls_with("POST")

    updated = vm.update_product(created.id, _payload(name="Cadeira Gamer X"))
    assert updated.name == "Cadeira Gamer X"
    assert [p.name for p in vm.products if p.id == created.id] == ["Cadeira Gamer X"]

    toggled = vm.toggle_product_status(updated)
    assert toggled.status == "disabled"
    assert toggled.model_dump(exclude={"status"}) == updated.model_dump(exclude={"status"})
    assert created.id in [p.id for p in vm.inactive_products]

    assert vm.delete_product(created.id) is True
    remaining = vm.products
    assert len(remaining) == len(before)
    assert created.id not in [p.id for p in remaining]
    assert vm.error_message is None


def test_tenant_cannot_toggle_or_delete(context, recorder, login_as):
    login_as("tenant@test.com")
    vm = ProductsViewModel(context)
    product = vm.products[0]

    assert vm.is_admin is False
    assert vm.toggle_product_status(product) is None
    assert vm.error_message == ADMIN_ONLY_MESSAGE
    assert vm.delete_product(product.id, confirm=lambda _id: True) is False

    assert recorder.calls_with("PATCH") == []
    assert recorder.calls_with("DELETE") == []
    assert vm.status_mutation.status == "idle"
    assert vm.delete_mutation.status == "idle"


def test_tenant_can_create_and_edit(context, recorder, login_as):
    login_as("tenant@test.com")
    vm = ProductsViewModel(context)

    created = vm.create_product(_payload(name="Webcam", price=300))
    assert created.id == 3
    edited = vm.update_product(created.id, _payload(name="Webcam HD", price=350))
    assert edited.name == "Webcam HD"
    assert recorder.calls_with("PUT") == [f"http://testserver/tenant/products/{created.id}"]


def test_delete_asks_for_confirmation(context, recorder, login_as):
    login_as("admin@test.com")
    vm = ProductsViewModel(context)
    asked = []

    def decline(product_id):
        asked.append(product_id)
        return False

    assert vm.delete_product(1, confirm=decline) is False
    assert asked == [1]
    assert recorder.calls_with("DELETE") == []


def test_auto_confirm_flag_skips_confirmation(context, recorder, login_as):
    login_as("admin@test.com")
    context.storage.set_item(AUTO_CONFIRM_DELETE_KEY, "true")
    vm = ProductsViewModel(context)

    def fail(_product_id):
        raise AssertionError("confirmation should be skipped")

    assert vm.delete_product(2, confirm=fail) is True
    assert recorder.calls_with("DELETE") == ["http://testserver/admin/products/2"]


def test_delete_clears_matching_selection(context, login_as):
    login_as("admin@test.com")
    vm = ProductsViewModel(context)
    vm.select_product(vm.products[0])
    vm.toggle_dialog(True)

    assert vm.delete_product(vm.state.selected_product.id) is True
    assert vm.state.selected_product is None
    assert vm.state.is_dialog_open is True


def test_failed_mutation_sets_error_without_raising(context, login_as):
    login_as("admin@test.com")
    vm = ProductsViewModel(context)

    assert vm.update_product(999, _payload()) is None
    assert vm.error_message == "Product not found."
    assert isinstance(vm.update_mutation.error, ApiError)
    assert vm.update_mutation.error.status_code == 404


def test_cache_is_partitioned_by_role(context, login_as):
    login_as("admin@test.com")
    admin_vm = ProductsViewModel(context)
    admin_names = [p.name for p in admin_vm.products]

    context.auth_service.logout().join(timeout=5)
    login_as("tenant@test.com")
    tenant_vm = ProductsViewModel(context)

    assert tenant_vm.query_key == ("products", "tenant")
    assert [p.name for p in tenant_vm.products] != admin_names


def test_refresh_clears_earlier_error(context, login_as):
    login_as("admin@test.com")
    vm = ProductsViewModel(context)
    vm.products

    vm.update_product(999, _payload())
    # Cached list is still fresh, the failure stays visible
    vm.products
    assert vm.error_message == "Product not found."

    vm.refresh()
    assert vm.error_message is None
