"""CLI entry point for UGC Builder."""

import logging
import typer
from pathlib import Path
from typing import Optional

from google.auth.exceptions import GoogleAuthError
from pydantic import ValidationError

from . import __version__
from .config import config
from .errors import UGCBError
from .models import Actor, ActorType, Asset, Brand, Brief, Gender

app = typer.Typer(
    name="ugcb",
    help="AI-assisted UGC brief builder",
    no_args_is_help=True
)
brand_app = typer.Typer(help="Manage brands", no_args_is_help=True)
actor_app = typer.Typer(help="Manage actors", no_args_is_help=True)
asset_app = typer.Typer(help="Manage uploaded assets", no_args_is_help=True)
app.add_typer(brand_app, name="brand")
app.add_typer(actor_app, name="actor")
app.add_typer(asset_app, name="asset")

# Headline per failure class; the exception message adds the detail
ERROR_HEADLINES = {
    "input": "Invalid input",
    "fetch": "Could not fetch the page",
    "content": "Not enough content",
    "model": "Language model error",
    "parse": "Could not read the model's answer",
    "structural": "The generated brief is incomplete",
    "timeout": "The assistant took too long",
    "run-failure": "The assistant run failed",
    "no-response": "The assistant did not answer",
    "image": "Image generation failed",
    "storage": "Storage error",
}


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def fail(error: UGCBError) -> None:
    """Print a classified error and exit."""
    headline = ERROR_HEADLINES.get(error.kind, "Error")
    typer.echo(f"❌ {headline}: {error.message}")
    raise typer.Exit(1)


def open_database():
    from .store import Database
    return Database(config.database)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"ugcb version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
) -> None:
    """UGC Builder - Create video ad briefs from web pages using AI."""
    pass


def show_brief(brief: Brief) -> None:
    typer.echo(f"📋 {brief.title} [{brief.language or '?'}]")
    if brief.source_url:
        typer.echo(f"   Source: {brief.source_url}")
    typer.echo(f"   Scenes: {len(brief.scenes)}  Total: {brief.total_seconds:.0f}s")
    for scene in brief.scenes:
        tone = ", ".join(scene.tone) if scene.tone else "-"
        seconds = f"{scene.time_seconds:g}s" if scene.time_seconds else "?s"
        typer.echo(f"\n   {scene.scene_number}. {scene.scene_title or '(untitled)'} ({seconds}, {tone})")
        typer.echo(f"      {scene.script or '(no script)'}")
        if scene.visual.description:
            typer.echo(f"      🎥 {scene.visual.description}")
        if scene.visual.has_asset:
            typer.echo(f"      🖼  {scene.visual.image_url}")


@app.command()
def generate(
    url: str = typer.Argument(
        ...,
        help="Web page to build the brief from"
    ),
    output: Path = typer.Option(
        Path("brief.yaml"),
        "--output",
        "-o",
        help="Output brief file path"
    ),
    save: bool = typer.Option(
        False,
        "--save",
        help="Also store the brief in the database"
    ),
    brand_id: Optional[str] = typer.Option(
        None,
        "--brand",
        help="Brand ID to attach when saving"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Generate a 5-scene brief from a web page."""
    from .agents import BriefAgent

    setup_logging(verbose)
    typer.echo(f"🔎 Building brief from: {url}")

    try:
        config.validate_required()
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    try:
        agent = BriefAgent()
        typer.echo(f"   Using model: {agent.model}")
        brief = agent.run(url)
    except UGCBError as e:
        fail(e)

    output.parent.mkdir(parents=True, exist_ok=True)
    brief.to_yaml(output)
    typer.echo(f"✅ Brief saved: {output}\n")
    show_brief(brief)

    if save:
        try:
            brief_id = open_database().create_brief(brief, brand_id=brand_id)
        except UGCBError as e:
            fail(e)
        typer.echo(f"\n💾 Stored as {brief_id}")


@app.command()
def chat(
    brief_file: Optional[Path] = typer.Option(
        None,
        "--brief",
        "-b",
        help="Start from an existing brief file",
        exists=True,
        dir_okay=False
    ),
    output: Path = typer.Option(
        Path("brief.yaml"),
        "--output",
        "-o",
        help="Where /save writes the working brief"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Edit a brief in conversation with the assistant.

    Commands: /show, /save, /store, /reset, /quit.
    """
    from .agents import BriefConversation

    setup_logging(verbose)

    try:
        config.validate_chat_required()
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    brief = Brief.from_yaml(brief_file) if brief_file else None
    conversation = BriefConversation(brief=brief)
    typer.echo("💬 Describe the brief you want. /quit to leave.")

    while True:
        message = typer.prompt("you", prompt_suffix="> ").strip()

        if message in ("/quit", "/exit"):
            break
        if message == "/show":
            show_brief(conversation.brief)
            continue
        if message == "/reset":
            conversation.reset()
            typer.echo("🔄 Started over")
            continue
        if message == "/save":
            conversation.brief.to_yaml(output)
            typer.echo(f"✅ Brief saved: {output}")
            continue
        if message == "/store":
            try:
                brief_id = open_database().create_brief(conversation.brief)
                typer.echo(f"💾 Stored as {brief_id}")
            except UGCBError as e:
                typer.echo(f"❌ {ERROR_HEADLINES.get(e.kind, 'Error')}: {e.message}")
            continue

        try:
            turn = conversation.send(message)
        except UGCBError as e:
            typer.echo(f"❌ {ERROR_HEADLINES.get(e.kind, 'Error')}: {e.message}")
            continue

        typer.echo(f"assistant> {turn.display_text}")
        if turn.brief_delta is not None:
            typer.echo(f"   ({len(conversation.brief.scenes)} scenes, /show to view)")


@app.command()
def illustrate(
    brief_file: Path = typer.Argument(
        ...,
        help="Brief YAML file",
        exists=True,
        dir_okay=False
    ),
    scene: Optional[int] = typer.Option(
        None,
        "--scene",
        "-s",
        help="Scene number (all scenes without an image if omitted)"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Generate portrait visuals for brief scenes with Imagen."""
    from .agents import SceneImager

    setup_logging(verbose)

    try:
        config.validate_imagery_required()
        imager = SceneImager()
    except (ValueError, GoogleAuthError) as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    brief = Brief.from_yaml(brief_file)
    numbers = [scene] if scene else [s.scene_number for s in brief.scenes if not s.visual.has_asset]

    if not numbers:
        typer.echo("✅ Every scene already has an image")
        raise typer.Exit(0)

    for number in numbers:
        try:
            url = imager.illustrate(brief, number)
        except UGCBError as e:
            brief.to_yaml(brief_file)
            fail(e)
        typer.echo(f"   🖼  Scene {number}: {url}")

    brief.to_yaml(brief_file)
    typer.echo(f"✅ Brief updated: {brief_file}")


@app.command()
def briefs() -> None:
    """List stored briefs, newest first."""
    rows = open_database().list_briefs()
    if not rows:
        typer.echo("No briefs yet")
        return
    for row in rows:
        typer.echo(f"{row['id']}  {row['created_at'][:16]}  {row['title']}")


@app.command()
def show(
    brief_id: str = typer.Argument(..., help="Brief ID"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Export the brief to a YAML file"
    ),
) -> None:
    """Show a stored brief."""
    brief = open_database().get_brief(brief_id)
    if brief is None:
        typer.echo(f"❌ Brief not found: {brief_id}")
        raise typer.Exit(1)

    show_brief(brief)
    if output:
        brief.to_yaml(output)
        typer.echo(f"\n✅ Exported: {output}")


@brand_app.command("add")
def brand_add(
    name: str = typer.Argument(..., help="Brand name"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    website: Optional[str] = typer.Option(None, "--website", "-w"),
    contact_name: Optional[str] = typer.Option(None, "--contact-name"),
    contact_email: Optional[str] = typer.Option(None, "--contact-email"),
    logo_asset_id: Optional[str] = typer.Option(None, "--logo", help="Asset ID of the logo"),
) -> None:
    """Add a brand."""
    try:
        brand = Brand(
            name=name,
            description=description,
            website=website,
            primary_contact_name=contact_name,
            primary_contact_email=contact_email,
            logo_asset_id=logo_asset_id,
        )
    except ValidationError as e:
        typer.echo(f"❌ Invalid input data: {e}")
        raise typer.Exit(1)

    try:
        brand_id = open_database().create_brand(brand)
    except UGCBError as e:
        fail(e)
    typer.echo(f"✅ Brand created: {brand_id}")


@brand_app.command("list")
def brand_list() -> None:
    """List brands."""
    for brand in open_database().list_brands():
        extra = f"  {brand.website}" if brand.website else ""
        typer.echo(f"{brand.id}  {brand.name}{extra}")


@actor_app.command("add")
def actor_add(
    name: str = typer.Argument(..., help="Actor name"),
    nationality: Optional[str] = typer.Option(None, "--nationality", "-n"),
    gender: Optional[Gender] = typer.Option(None, "--gender", "-g"),
    actor_type: ActorType = typer.Option(ActorType.HUMAN, "--type", "-t"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Visual description"),
    profile_image: Optional[str] = typer.Option(None, "--image", help="Profile image URL"),
    voice_id: Optional[str] = typer.Option(None, "--voice", help="ElevenLabs voice ID"),
) -> None:
    """Add an actor."""
    try:
        actor = Actor(
            name=name,
            nationality=nationality,
            gender=gender,
            actor_type=actor_type,
            visual_description=description,
            profile_image=profile_image,
            elevenlabs_voice_id=voice_id,
        )
    except ValidationError as e:
        typer.echo(f"❌ Invalid input data: {e}")
        raise typer.Exit(1)

    try:
        actor_id = open_database().create_actor(actor)
    except UGCBError as e:
        fail(e)
    typer.echo(f"✅ Actor created: {actor_id}")


@actor_app.command("list")
def actor_list() -> None:
    """List actors."""
    for actor in open_database().list_actors():
        typer.echo(f"{actor.id}  {actor.name}  ({actor.actor_type.value}, {actor.nationality or '-'})")


@asset_app.command("upload")
def asset_upload(
    path: Path = typer.Argument(..., help="Image file (JPG, PNG, GIF, WEBP, max 5MB)"),
    kind: str = typer.Option("uploads", "--kind", "-k", help="Folder, e.g. headshots or logos"),
) -> None:
    """Upload an image to blob storage and record it as an asset."""
    from .services.storage import BlobStore

    try:
        store = BlobStore()
    except (ValueError, GoogleAuthError) as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    try:
        url, mime_type, size = store.upload_image(path, prefix=kind)
        asset_id = open_database().create_asset(
            Asset(filename=path.name, url=url, mime_type=mime_type, file_size_bytes=size)
        )
    except UGCBError as e:
        fail(e)
    typer.echo(f"✅ Asset created: {asset_id}")
    typer.echo(f"   {url}")


@asset_app.command("list")
def asset_list() -> None:
    """List uploaded assets."""
    for asset in open_database().list_assets():
        typer.echo(f"{asset.id}  {asset.filename}  {asset.mime_type}  {asset.url}")


if __name__ == "__main__":
    app()
