"""Music League Strategist: narrow a round's songs down to one pick."""

import argparse
import logging
import sys
from datetime import datetime

from src.domain.errors import FunnelError
from src.domain.model import Song, Tier
from src.version import __version__


def _tier(value: str) -> Tier:
    try:
        return Tier(value.lower())
    except ValueError:
        raise argparse.ArgumentTypeError(f"tier must be one of: {', '.join(t.value for t in Tier)}")


def _deadline(value: str) -> int:
    return int(datetime.strptime(value, "%Y-%m-%d").timestamp() * 1000)


CONFIG_OPTIONS = (
    "spotify_client_id",
    "spotify_client_secret",
    "spotify_redirect_uri",
    "llm_provider",
    "llm_api_key",
    "llm_model",
    "themes_file",
    "collection_file",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="music-league", description=__doc__)
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    configure = sub.add_parser("configure", help="store credentials and preferences")
    for option in CONFIG_OPTIONS:
        configure.add_argument(f"--{option.replace('_', '-')}", dest=option)
    configure.add_argument("--simulation", choices=("on", "off"), help="dry-run playlist sync")

    sub.add_parser("themes", help="list themes")

    new = sub.add_parser("new", help="start a theme from a round prompt")
    new.add_argument("prompt")
    new.add_argument("--deadline", type=_deadline, help="YYYY-MM-DD")

    for name in ("show", "archive", "submit"):
        cmd = sub.add_parser(name)
        cmd.add_argument("theme_id")

    add = sub.add_parser("add", help="add a candidate")
    add.add_argument("theme_id")
    add.add_argument("title", nargs="?")
    add.add_argument("artist", nargs="?")
    add.add_argument("--reason", default="Added manually")
    add.add_argument("--from-saved", metavar="SAVED_ID", help="copy a song from Songs I Like")

    saved = sub.add_parser("saved", help="the Songs I Like collection")
    saved_sub = saved.add_subparsers(dest="saved_command", required=True)
    saved_list = saved_sub.add_parser("list")
    saved_list.add_argument("--tag")
    saved_add = saved_sub.add_parser("add", help="save a song by title and artist")
    saved_add.add_argument("title")
    saved_add.add_argument("artist")
    saved_keep = saved_sub.add_parser("keep", help="save a song from a theme")
    saved_keep.add_argument("theme_id")
    saved_keep.add_argument("song_id")
    for cmd in (saved_add, saved_keep):
        cmd.add_argument("--tag", action="append", default=[], dest="tags")
        cmd.add_argument("--notes")
    saved_remove = saved_sub.add_parser("remove")
    saved_remove.add_argument("saved_id")
    saved_tag = saved_sub.add_parser("tag")
    saved_tag.add_argument("saved_id")
    saved_tag.add_argument("--add", action="append", default=[])
    saved_tag.add_argument("--remove", action="append", default=[])

    for name in ("promote", "demote"):
        cmd = sub.add_parser(name)
        cmd.add_argument("theme_id")
        cmd.add_argument("song_id")
        cmd.add_argument("tier", type=_tier)
        cmd.add_argument("--reason")

    remove = sub.add_parser("remove")
    remove.add_argument("theme_id")
    remove.add_argument("song_id")
    remove.add_argument("tier", type=_tier)
    remove.add_argument("--reject", metavar="REASON", help="remember the song as rejected")

    mute = sub.add_parser("mute", help="toggle playlist exclusion")
    mute.add_argument("theme_id")
    mute.add_argument("song_id")

    rank = sub.add_parser("rank", help="reorder a tier")
    rank.add_argument("theme_id")
    rank.add_argument("tier", type=_tier)
    rank.add_argument("song_ids", nargs="+")

    hall_pass = sub.add_parser("hall-pass", help="skip a song straight into a tier")
    hall_pass.add_argument("theme_id")
    hall_pass.add_argument("tier", type=_tier)
    hall_pass.add_argument("--song-id")
    hall_pass.add_argument("--title")
    hall_pass.add_argument("--artist")
    hall_pass.add_argument("--reason")

    chat = sub.add_parser("chat", help="ask the strategist")
    chat.add_argument("theme_id")
    chat.add_argument("message")
    chat.add_argument("--fresh", action="store_true", help="forget earlier turns for this theme first")

    sync = sub.add_parser("sync", help="mirror a tier to Spotify")
    sync.add_argument("theme_id")
    sync.add_argument("--tier", type=_tier)

    export = sub.add_parser("export", help="print or write a markdown summary")
    export.add_argument("theme_id")
    export.add_argument("--out")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "configure":
        _configure(args)
        return

    from src.adapters.themes.json_theme_repository import JsonThemeRepository
    from src.config import load_settings

    settings = load_settings()
    themes = JsonThemeRepository(settings.themes_file)

    try:
        _run(args, settings, themes)
    except FunnelError as e:
        print(f"Not allowed: {e}")
        sys.exit(1)


def _run(args, settings, themes):
    from src.domain import funnel
    from src.domain.phase import compute_phase
    from src.usecases.create_theme import CreateThemeUseCase
    from src.usecases.export_summary import ExportSummaryUseCase
    from src.usecases.manage_funnel import ManageFunnelUseCase
    from src.usecases.manage_theme import ManageThemeUseCase

    manage = ManageFunnelUseCase(themes, settings.thresholds)

    if args.command == "themes":
        for theme in themes.list_all():
            phase = compute_phase(theme, settings.thresholds)
            print(f"{theme.id}  [{theme.status.value}/{phase.value}]  {theme.title}  ({funnel.total_song_count(theme)} songs)")
    elif args.command == "new":
        theme = CreateThemeUseCase(themes).execute(args.prompt, deadline=args.deadline)
        print(f"Created {theme.id}: {theme.title}")
    elif args.command == "show":
        print(ExportSummaryUseCase(themes).execute(args.theme_id))
        passes = manage.hall_passes(args.theme_id)
        print(f"\nPhase: {manage.phase(args.theme_id).value}")
        print(f"Hall passes: semifinals={'yes' if passes.semifinals else 'used'} finals={'yes' if passes.finals else 'used'}")
    elif args.command == "archive":
        ManageThemeUseCase(themes).archive(args.theme_id)
    elif args.command == "submit":
        ManageThemeUseCase(themes).mark_submitted(args.theme_id)
    elif args.command == "add":
        if args.from_saved:
            theme = _collection(settings, themes).add_to_theme(args.from_saved, args.theme_id)
        elif args.title and args.artist:
            theme = manage.add_song_from_collection(
                args.theme_id, Song(id="", title=args.title, artist=args.artist, reason=args.reason)
            )
        else:
            print("Give a title and artist, or --from-saved")
            sys.exit(1)
        print(f"Added {theme.candidates[-1].id}")
    elif args.command == "saved":
        _saved(args, _collection(settings, themes))
    elif args.command == "promote":
        manage.promote_song(args.theme_id, args.song_id, args.tier, args.reason)
    elif args.command == "demote":
        manage.demote_song(args.theme_id, args.song_id, args.tier, args.reason)
    elif args.command == "remove":
        manage.remove_song_from_tier(args.theme_id, args.song_id, args.tier, args.reject)
    elif args.command == "mute":
        manage.toggle_muted(args.theme_id, args.song_id)
    elif args.command == "rank":
        manage.reorder_songs_in_tier(args.theme_id, args.tier, args.song_ids)
    elif args.command == "hall-pass":
        _hall_pass(args, manage, themes)
    elif args.command == "chat":
        _chat(args, settings, themes)
    elif args.command == "sync":
        _sync(args, settings, themes)
    elif args.command == "export":
        print(ExportSummaryUseCase(themes).execute(args.theme_id, args.out))


def _configure(args):
    from src.adapters.config.json_config_adapter import JsonConfigAdapter
    from src.adapters.strategist import PROVIDERS

    changes = {option: getattr(args, option) for option in CONFIG_OPTIONS if getattr(args, option) is not None}
    if args.simulation:
        changes["simulation_mode"] = args.simulation == "on"
    if "llm_provider" in changes and changes["llm_provider"] not in PROVIDERS:
        print(f"llm_provider must be one of: {', '.join(PROVIDERS)}")
        sys.exit(1)

    adapter = JsonConfigAdapter()
    cfg = adapter.update(**changes) if changes else adapter.load()
    for option in CONFIG_OPTIONS:
        value = cfg.get(option) or ""
        if option in ("spotify_client_secret", "llm_api_key") and value:
            value = "(set)"
        print(f"{option}: {value}")
    print(f"simulation_mode: {cfg.get('simulation_mode')}")


def _hall_pass(args, manage, themes):
    from src.domain import funnel
    from src.usecases._lookup import require_theme

    if args.song_id:
        song = funnel.find_song(require_theme(themes, args.theme_id), args.song_id)
        if song is None:
            print(f"Song {args.song_id} is not in this theme")
            sys.exit(1)
    elif args.title and args.artist:
        song = Song(id="", title=args.title, artist=args.artist, reason=args.reason or "Hall pass")
    else:
        print("Give --song-id, or --title and --artist")
        sys.exit(1)
    manage.use_hall_pass(args.theme_id, song, args.tier, args.reason)


def _collection(settings, themes):
    from src.adapters.collection.json_saved_song_repository import JsonSavedSongRepository
    from src.usecases.manage_collection import ManageCollectionUseCase

    return ManageCollectionUseCase(JsonSavedSongRepository(settings.collection_file), themes)


def _saved(args, collection):
    if args.saved_command == "list":
        for song in collection.list_songs(args.tag):
            tags = f"  [{', '.join(song.tags)}]" if song.tags else ""
            print(f'{song.id}  "{song.title}" by {song.artist}{tags}')
    elif args.saved_command == "add":
        song = collection.save_song(args.title, args.artist, tags=args.tags, notes=args.notes)
        print(f"Saved {song.id}")
    elif args.saved_command == "keep":
        song = collection.save_from_theme(args.theme_id, args.song_id, tags=args.tags, notes=args.notes)
        print(f"Saved {song.id}")
    elif args.saved_command == "remove":
        collection.remove(args.saved_id)
    elif args.saved_command == "tag":
        song = collection.tag(args.saved_id, add=args.add, remove=args.remove)
        print(f"{song.id}: {', '.join(song.tags) or '(no tags)'}")


def _chat(args, settings, themes):
    from src.adapters.strategist import build_strategist
    from src.usecases.ask_strategist import AskStrategistUseCase
    from src.usecases.manage_theme import ManageThemeUseCase

    if not settings.llm_api_key:
        print("No LLM API key configured. Run: music-league configure --llm-api-key ...")
        sys.exit(1)

    strategist = build_strategist(
        settings.llm_provider,
        settings.llm_api_key,
        settings.resolved_model,
        settings.llm_timeout,
        thresholds=settings.thresholds,
    )
    if args.fresh:
        ManageThemeUseCase(themes).clear_conversation(args.theme_id)
    try:
        turn = AskStrategistUseCase(strategist, themes).execute(args.theme_id, args.message)
    except Exception as e:
        print(f"Strategist request failed: {e}")
        sys.exit(1)

    print(turn.reply.message)
    for song in turn.added:
        print(f'  + {song.id}  "{song.title}" by {song.artist}')
    for outcome in turn.tier_report.applied:
        print(f"  > {outcome.action.action.value} {outcome.action.song_title}")
    for outcome in turn.tier_report.skipped:
        print(f"  ! skipped {outcome.action.action.value} {outcome.action.song_title}: {outcome.detail}")


def _sync(args, settings, themes):
    from src.adapters.spotify.dry_run_playlist_adapter import DryRunPlaylistAdapter
    from src.usecases.sync_playlist import EmptyTierError, SyncPlaylistUseCase

    if settings.simulation_mode:
        use_case = SyncPlaylistUseCase(DryRunPlaylistAdapter(), themes)
    else:
        if not settings.spotify_enabled:
            print("Spotify is not configured. Run: music-league configure --spotify-client-id ... --spotify-client-secret ...")
            sys.exit(1)
        from src.adapters.spotify.auth import spotify_client
        from src.adapters.spotify.catalog_adapter import SpotifyCatalogAdapter
        from src.adapters.spotify.playlist_adapter import SpotifyPlaylistAdapter

        sp = spotify_client(settings)
        use_case = SyncPlaylistUseCase(SpotifyPlaylistAdapter(sp), themes, SpotifyCatalogAdapter(sp))

    try:
        result = use_case.execute(args.theme_id, args.tier)
    except EmptyTierError as e:
        print(str(e))
        sys.exit(1)
    print(f"Playlist: {result.playlist_url} (added {result.added}, removed {result.removed})")


if __name__ == "__main__":
    main()
