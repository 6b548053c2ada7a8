"""
命令行入口
"""

from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.prompt import Confirm, Prompt

from devhosts.app import DevHosts
from devhosts.config import Config
from devhosts.errors import DevHostsError

PROJECT_NAME = "devhosts"
NEW_PROFILE = "+new"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Manage local development hosts and port forwarding profiles."
)
console = Console(emoji=False, highlight=False)
err_console = Console(stderr=True, emoji=False, highlight=False)


def prompt_chooser(message: str, profiles: List[str]) -> str:
    """交互式选择配置，可选择新建"""
    choice = Prompt.ask(message, choices=[*profiles, NEW_PROFILE], console=console)
    if choice == NEW_PROFILE:
        return Prompt.ask(
            "What would you like to call this profile? (ex. my-project)",
            console=console
        )
    return choice


def _fail(message: str) -> NoReturn:
    err_console.print(f"\n❌  {message}\n", markup=False)
    raise typer.Exit(1)


def _load(command: str, check_init: bool = True) -> DevHosts:
    try:
        devhosts = DevHosts(Config.from_env(), chooser=prompt_chooser)
    except ValueError as e:
        _fail(str(e))

    if check_init and not devhosts.store.is_initialized():
        if not Confirm.ask(
            f"No {PROJECT_NAME} configuration initialized. Create?", console=console
        ):
            _fail(f"Please run `{PROJECT_NAME} init` to use `{command}`")
        try:
            devhosts.store.initialize()
        except (DevHostsError, OSError) as e:
            _fail(str(e))
    return devhosts


@app.command()
def init() -> None:
    """Setup configuration at ~/.config/devhosts."""
    devhosts = _load("init", check_init=False)
    root = devhosts.store.root
    if not Confirm.ask(f"Creating {PROJECT_NAME} configuration at {root}. Ok?", console=console):
        _fail("Initialization cancelled.")
    try:
        devhosts.store.initialize()
    except DevHostsError as e:
        _fail(str(e))
    console.print(
        f"\n✅  Done. Use `{PROJECT_NAME} new <profile-name>` or "
        f"`{PROJECT_NAME} map <from> <to>` to get started.",
        markup=False
    )


@app.command()
def new(name: str) -> None:
    """Create an empty profile."""
    devhosts = _load("new")
    try:
        devhosts.create_profile(name)
    except DevHostsError as e:
        _fail(str(e))
    console.print(f"✅  Created profile '{name}'", markup=False)


@app.command("list")
def list_profiles() -> None:
    """List profiles, marking the current one."""
    devhosts = _load("list")
    current = devhosts.current_profile()
    for name in sorted(devhosts.list_profiles()):
        marker = "*" if name == current else " "
        console.print(f"{marker} {name}", markup=False)


@app.command()
def current() -> None:
    """Print the current profile."""
    devhosts = _load("current")
    name = devhosts.current_profile()
    if name is None:
        _fail("No active profile")
    console.print(name, markup=False)


@app.command("map")
def map_command(
    hostname: str,
    ip: str,
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p",
        help="Profile to add mapping to. Defaults to the active profile."
    )
) -> None:
    """Map hosts (map my.dev 127.0.0.1), or map specific ports (map my.dev:80 127.0.0.1:3000)."""
    devhosts = _load("map")
    try:
        target = devhosts.add_mapping(hostname, ip, profile)
    except DevHostsError as e:
        _fail(str(e))
    console.print(f"✅  added mapping '{hostname} {ip}' to profile {target}", markup=False)


@app.command()
def activate(profile: str) -> None:
    """Activate a profile."""
    devhosts = _load("activate")
    try:
        name = devhosts.activate_profile(profile)
    except DevHostsError as e:
        _fail(str(e))
    console.print(f"✅  Activated profile '{name}'", markup=False)


@app.command()
def update() -> None:
    """Updates OS hosts and port settings to your current configured settings."""
    devhosts = _load("update")
    try:
        devhosts.activate_current()
    except DevHostsError as e:
        _fail(str(e))


@app.command()
def edit(profile: str) -> None:
    """Open a profile in $EDITOR."""
    devhosts = _load("edit")
    try:
        path = devhosts.store.profile_path(profile)
    except DevHostsError as e:
        _fail(str(e))
    typer.edit(filename=str(path))


@app.command("edit-default")
def edit_default() -> None:
    """Edit default hosts. Default hosts are always loaded, for entries like: `127.0.0.1 localhost`."""
    devhosts = _load("edit-default")
    typer.edit(filename=str(devhosts.store.default_hosts_file))


def main() -> None:
    app(prog_name=PROJECT_NAME)
