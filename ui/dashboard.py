"""Store Catalog Terminal Dashboard - Main UI Entry Point"""

import sys
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt
from rich.table import Table

from catalog.auth.viewmodels import LoginViewModel, RegisterViewModel
from catalog.context import AppContext, create_context
from catalog.products.models import Product, ProductPatch, apply_patch
from catalog.products.viewmodels import ProductsViewModel, build_product_payload
from catalog.utils.config import load_settings
from catalog.utils.exceptions import CatalogError
from catalog.utils.logger import setup_logging

console = Console()

STATUS_LABELS = {"activated": "[green]Ativo[/green]", "disabled": "[red]Inativo[/red]"}


class CatalogDashboard:
    """Renders the view-models; every decision is made by them."""

    def __init__(self, context: AppContext):
        self.context = context
        self.running = True

    # -- Auth screens --

    def login_screen(self):
        console.clear()
        console.print(Panel("Entrar", title="Store Catalog", border_style="cyan"))
        vm = LoginViewModel(self.context)
        vm.update_field("email", Prompt.ask("E-mail"))
        vm.update_field("password", Prompt.ask("Senha", password=True))
        if not vm.is_form_valid:
            console.print("[yellow]Informe e-mail e senha.[/yellow]")
            return
        vm.submit()
        if vm.error_message:
            console.print(f"[bold red]✗ {vm.error_message}[/bold red]")
        else:
            console.print(f"[bold green]✓ Logged in as {self.context.session_store.role}[/bold green]")

    def register_screen(self):
        console.clear()
        console.print(Panel("Cadastro", title="Store Catalog", border_style="cyan"))
        vm = RegisterViewModel(self.context)
        vm.update_field("name", Prompt.ask("Nome"))
        vm.update_field("email", Prompt.ask("E-mail"))
        vm.update_field("password", Prompt.ask("Senha", password=True))
        vm.update_confirm_password(Prompt.ask("Confirme a senha", password=True))
        vm.update_field("role", Prompt.ask("Perfil", choices=["tenant", "admin"], default="tenant"))
        if not vm.is_password_length_valid:
            console.print("[yellow]A senha precisa de pelo menos 3 caracteres.[/yellow]")
            return
        if not vm.do_passwords_match:
            console.print("[yellow]As senhas não conferem.[/yellow]")
            return
        if not vm.submit():
            console.print(f"[bold red]✗ {vm.error_message or 'Preencha todos os campos.'}[/bold red]")
            return
        console.print("[bold green]✓ Cadastro concluído. Faça login.[/bold green]")

    # -- Products screens --

    def _products_table(self, products: List[Product]) -> Table:
        table = Table(title="Produtos", box=box.ROUNDED, show_header=True)
        table.add_column("ID", justify="right")
        table.add_column("Nome")
        table.add_column("Preço", justify="right")
        table.add_column("Status")
        table.add_column("Descrição")
        for product in products:
            table.add_row(
                str(product.id),
                product.name,
                f"{product.price:.2f}",
                STATUS_LABELS.get(product.status, product.status),
                product.description,
            )
        return table

    def _pick_product(self, vm: ProductsViewModel) -> Optional[Product]:
        product_id = IntPrompt.ask("ID do produto")
        product = next((p for p in vm.products if p.id == product_id), None)
        if product is None:
            console.print("[yellow]Produto não encontrado.[/yellow]")
        vm.select_product(product)
        return product

    def _report(self, vm: ProductsViewModel, ok_message: str, ok: bool):
        if ok:
            console.print(f"[bold green]✓ {ok_message}[/bold green]")
        else:
            console.print(f"[bold red]✗ {vm.error_message}[/bold red]")

    def products_screen(self):
        vm = ProductsViewModel(self.context)
        while self.running and self.context.session_store.is_authenticated:
            console.clear()
            products = vm.products
            console.print(self._products_table(products))
            console.print(
                f"Ativos: {len(vm.active_products)}  Inativos: {len(vm.inactive_products)}  "
                f"Perfil: {self.context.session_store.role}"
            )
            if vm.error_message:
                console.print(f"[bold red]{vm.error_message}[/bold red]")

            options = ["n", "e", "r", "l", "q"]
            menu_text = "[N] Novo Produto  [E] Editar  [R] Recarregar  [L] Sair da conta  [Q] Fechar"
            if vm.is_admin:
                options[2:2] = ["s", "x"]
                menu_text = "[N] Novo Produto  [E] Editar  [S] Alternar status  [X] Excluir  [R] Recarregar  [L] Sair da conta  [Q] Fechar"
            console.print(Panel(menu_text, title="Menu", border_style="cyan"))
            choice = Prompt.ask("Opção", choices=options + [o.upper() for o in options], default="r").lower()

            if choice == "n":
                self._create(vm)
            elif choice == "e":
                self._edit(vm)
            elif choice == "s":
                product = self._pick_product(vm)
                if product:
                    self._report(vm, "Status atualizado", vm.toggle_product_status(product) is not None)
            elif choice == "x":
                product = self._pick_product(vm)
                if product:
                    deleted = vm.delete_product(
                        product.id,
                        confirm=lambda _id: Confirm.ask(f"Excluir {product.name}?", default=False),
                    )
                    self._report(vm, "Produto excluído", deleted)
            elif choice == "r":
                vm.refresh()
            elif choice == "l":
                self.context.auth_service.logout()
                self.context.query_cache.clear()
            elif choice == "q":
                self.running = False
            if choice in ("n", "e", "s", "x"):
                Prompt.ask("Enter para continuar", default="")

    def _create(self, vm: ProductsViewModel):
        try:
            payload = build_product_payload(
                name=Prompt.ask("Nome"),
                price=FloatPrompt.ask("Preço"),
                image=Prompt.ask("URL da imagem", default=""),
                description=Prompt.ask("Descrição", default=""),
            )
        except CatalogError as e:
            console.print(f"[bold red]✗ {e}[/bold red]")
            return
        self._report(vm, "Produto criado", vm.create_product(payload) is not None)

    def _edit(self, vm: ProductsViewModel):
        product = self._pick_product(vm)
        if not product:
            return
        patch = ProductPatch(
            name=Prompt.ask("Nome", default=product.name),
            price=FloatPrompt.ask("Preço", default=product.price),
            image=Prompt.ask("URL da imagem", default=product.image),
            description=Prompt.ask("Descrição", default=product.description),
        )
        record = apply_patch(product.model_dump(), patch)
        try:
            payload = build_product_payload(**{k: v for k, v in record.items() if k != "id"})
        except CatalogError as e:
            console.print(f"[bold red]✗ {e}[/bold red]")
            return
        self._report(vm, "Produto atualizado", vm.update_product(product.id, payload) is not None)
        vm.clear_selection()

    # -- Main loop --

    def show_start_menu(self):
        menu_text = """
[bold cyan]Store Catalog[/bold cyan]

[1] Entrar
[2] Cadastrar
[Q] Sair
"""
        console.print(Panel(menu_text, title="Menu", border_style="cyan"))
        choice = Prompt.ask("Selecione", choices=["1", "2", "q", "Q"], default="1")
        if choice == "1":
            self.login_screen()
        elif choice == "2":
            self.register_screen()
        else:
            self.running = False

    def run(self):
        while self.running:
            location = self.context.navigator.push("products")
            if location.name == "products":
                self.products_screen()
            else:
                self.show_start_menu()


def main():
    """Main entry point for the dashboard"""
    settings = load_settings()
    setup_logging(
        level=settings.logging.level,
        fmt=settings.logging.format,
        file_path=settings.logging.file_path,
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count,
    )
    dashboard = CatalogDashboard(create_context(settings).load())

    try:
        dashboard.run()
    except KeyboardInterrupt:
        console.print("\n[yellow]Exiting dashboard...[/yellow]")
    except Exception as e:
        console.print(f"\n[bold red]Error: {e}[/bold red]")
        import traceback
        console.print(traceback.format_exc())
        sys.exit(1)


if __name__ == "__main__":
    main()
