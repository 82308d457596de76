"""Main entry point - prompt_toolkit REPL for running kingdom turns."""

from __future__ import annotations
import logging
import sys
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from thefuzz import fuzz

from kingdom_engine.bootstrap import starter_kingdom
from kingdom_engine.catalog.activities import ActivityCategory, ActivityDefinition
from kingdom_engine.config import EngineSettings, setup_logging
from kingdom_engine.engine import KingdomEngine, KingdomSession
from kingdom_engine.models.kingdom import HexStatus, Kingdom
from kingdom_engine.models.results import (
    ActivityResult,
    EngineFailure,
    EventResult,
    LevelUpResult,
    PhaseResult,
    TaxResult,
    TradeResult,
    TrainingResult,
    UpkeepResult,
)


console = Console()
logger = logging.getLogger(__name__)


def fuzzy_match_activity(engine: KingdomEngine, query: str, threshold: int = 70) -> Optional[ActivityDefinition]:
    """Find the activity whose id or name best matches the query."""
    query = query.lower().strip()
    exact = engine.catalog.activity(query)
    if exact is not None:
        return exact

    best_match = None
    best_score = 0
    for activity in engine.catalog.activities.values():
        score = max(fuzz.ratio(query, activity.name.lower()), fuzz.ratio(query, activity.id))
        if score > best_score and score >= threshold:
            best_score = score
            best_match = activity
    return best_match


def parse_inputs(tokens: list[str]) -> dict[str, Any]:
    """``key=value`` tokens into an inputs dict; commas make lists."""
    inputs: dict[str, Any] = {}
    for token in tokens:
        if "=" not in token:
            continue
        key, value = token.split("=", 1)
        inputs[key.strip()] = value.split(",") if key.strip() == "water_borders" else value.strip()
    return inputs


def print_help() -> None:
    table = Table(title="Commands", show_header=True, header_style="bold magenta")
    table.add_column("Command", style="cyan")
    table.add_column("Description")

    commands = [
        ("status", "Show the kingdom and the current phase"),
        ("skills", "Show skill modifiers"),
        ("hexes", "Show the hex map"),
        ("activities [category]", "List activities (leadership, region, civic)"),
        ("feats", "List feats available at the next level"),
        ("history", "Show completed turns"),
        ("upkeep", "Run the upkeep phase"),
        ("estimate <buy|sell> <commodity> <n>", "Price a trade at the neutral rate"),
        ("trade <buy|sell> <commodity> <n>", "Buy or sell commodities (commerce phase)"),
        ("taxes", "Collect taxes and close the commerce phase"),
        ("do <activity> [key=value ...]", "Perform an activity, e.g. do claim hex hex=b18"),
        ("done", "Finish the activity phase"),
        ("event", "Resolve the event phase"),
        ("end", "End the turn"),
        ("levelup <ability> <skill> [feat]", "Gain a kingdom level"),
        ("train <skill>", "Spend RP to train a skill"),
        ("help", "Show this help"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        table.add_row(cmd, desc)
    console.print(table)


def show_status(kingdom: Kingdom) -> None:
    ts = kingdom.turn_state
    lines = [
        kingdom.summary(),
        f"Phase: [bold]{ts.phase.value}[/bold]  Fame {kingdom.fame}  Infamy {kingdom.infamy}  Event DC {kingdom.event_dc}",
        "Abilities: " + ", ".join(f"{a.value} {s}" for a, s in kingdom.abilities.items()),
        "Ruin: " + ", ".join(f"{r.value} {t.score}/{t.threshold}" for r, t in kingdom.ruin.items()),
        "Commodities: " + ", ".join(f"{c.value} {s.amount}/{s.capacity}" for c, s in kingdom.commodities.items()),
        f"Activities: leadership {ts.leadership_used}/{ts.max_leadership}, "
        f"region {ts.region_used}/{ts.max_region}, civic {ts.civic_used}/{ts.max_civic}",
    ]
    if kingdom.feats:
        lines.append("Feats: " + ", ".join(kingdom.feats))
    console.print(Panel("\n".join(lines), title=kingdom.name, border_style="cyan"))


def show_skills(engine: KingdomEngine, kingdom: Kingdom) -> None:
    table = Table(title="Skills", show_header=True, header_style="bold magenta")
    table.add_column("Skill", style="cyan")
    table.add_column("Tier")
    table.add_column("Modifier", justify="right")
    table.add_column("Breakdown", style="dim")
    for skill in engine.catalog.skills():
        breakdown = engine.get_skill_modifier_breakdown(kingdom, skill)
        table.add_row(skill, kingdom.proficiency(skill).value, f"{breakdown.total:+d}", breakdown.describe())
    console.print(table)


def show_hexes(kingdom: Kingdom) -> None:
    table = Table(title="Hexes", show_header=True, header_style="bold magenta")
    table.add_column("Hex", style="cyan")
    table.add_column("Terrain")
    table.add_column("Status")
    table.add_column("Features", style="dim")
    names = {s.id: s.name for s in kingdom.settlements}
    for coordinate in sorted(kingdom.hexes):
        hex_ = kingdom.hexes[coordinate]
        features = []
        if hex_.settlement_id:
            features.append(names.get(hex_.settlement_id, "settlement"))
        if hex_.work_site:
            features.append(f"{hex_.work_site.type.value} ({hex_.work_site.production})")
        if hex_.roads:
            features.append("roads")
        if hex_.fortified:
            features.append(f"fortified +{hex_.defense_bonus}")
        style = "green" if hex_.status == HexStatus.CLAIMED else "white"
        table.add_row(coordinate, hex_.terrain.value, f"[{style}]{hex_.status.value}[/{style}]", ", ".join(features))
    console.print(table)


def show_activities(engine: KingdomEngine, kingdom: Kingdom, category: Optional[str] = None) -> None:
    table = Table(title="Activities", show_header=True, header_style="bold magenta")
    table.add_column("Activity", style="cyan")
    table.add_column("Category")
    table.add_column("Skill")
    table.add_column("RP", justify="right")
    table.add_column("Inputs", style="dim")
    if category:
        activities = engine.catalog.activities_in(ActivityCategory(category.lower()))
    else:
        activities = list(engine.catalog.activities.values())
    for activity in activities:
        cost = "structure" if activity.cost_from_structure else str(activity.rp_cost)
        skill = activity.skill or "-"
        if activity.skill:
            total = engine.get_skill_modifier_breakdown(kingdom, activity.skill, activity_id=activity.id).total
            skill = f"{activity.skill} {total:+d}"
        table.add_row(activity.name, activity.category.value, skill, cost, ", ".join(activity.required_inputs))
    console.print(table)


def show_result(result: Any) -> None:
    """Render any engine result as a rich panel."""
    if isinstance(result, EngineFailure):
        console.print(f"[red]{result.summary()}[/red]")
        return

    lines: list[str] = []
    title = "Result"
    check = getattr(result, "check", None)
    if check is not None:
        lines.append(check.summary())

    if isinstance(result, ActivityResult):
        title = result.activity_name
        lines.extend(result.log_lines)
    elif isinstance(result, TradeResult):
        title = f"Trade: {result.direction} {result.commodity.value}"
        lines.extend(e.message for e in result.effect_log)
    elif isinstance(result, TaxResult):
        title = "Collect Taxes"
        lines.extend(e.message for e in result.effect_log)
    elif isinstance(result, UpkeepResult):
        title = "Upkeep"
        lines.extend(result.log)
    elif isinstance(result, EventResult):
        title = "Event Phase"
        lines.append(f"Flat check {result.flat_check} vs DC {result.event_dc}")
        if result.event_details is None:
            lines.append("The month passes quietly.")
        else:
            details = result.event_details
            title = details.name
            if details.check is not None:
                lines.append(details.check.summary())
            lines.append(details.description)
            lines.extend(e.message for e in details.effect_log)
    elif isinstance(result, LevelUpResult):
        title = f"Level {result.new_level}"
        lines.extend(result.log)
    elif isinstance(result, TrainingResult):
        title = "Training"
        lines.append(f"{result.skill} is now {result.new_tier.value} ({result.cost} RP)")
    elif isinstance(result, PhaseResult):
        lines.append(result.message)
        if result.history_entry is not None:
            lines.append(result.history_entry.summary())

    console.print(Panel("\n".join(lines) or "No changes", title=title, border_style="blue"))


def confirm_and_commit(session: PromptSession, kingdom_session: KingdomSession, result: Any) -> None:
    """Preview, then let the player keep or discard the outcome."""
    show_result(result)
    if isinstance(result, EngineFailure):
        return
    answer = session.prompt("Commit this result? [Y/n] ").strip().lower()
    if answer in ("", "y", "yes"):
        kingdom_session.commit(result)
        console.print("[green]Committed.[/green]")
    else:
        console.print("[dim]Discarded.[/dim]")


def handle_activity(session: PromptSession, ks: KingdomSession, parts: list[str]) -> None:
    words = [p for p in parts[1:] if "=" not in p]
    if not words:
        console.print("[red]Usage: do <activity> [key=value ...][/red]")
        return
    activity = fuzzy_match_activity(ks.engine, " ".join(words))
    if activity is None:
        console.print(f"[red]Unknown activity: {' '.join(words)}[/red]")
        return
    inputs = parse_inputs(parts[1:])
    confirm_and_commit(session, ks, ks.preview("perform_activity", activity.id, inputs))


def handle_trade(session: PromptSession, ks: KingdomSession, parts: list[str], estimate_only: bool = False) -> None:
    if len(parts) != 4 or not parts[3].isdigit():
        console.print(f"[red]Usage: {parts[0]} <buy|sell> <commodity> <amount>[/red]")
        return
    direction, commodity, amount = parts[1], parts[2], int(parts[3])
    if estimate_only:
        estimate = ks.engine.estimate_trade(direction, commodity, amount)
        if isinstance(estimate, EngineFailure):
            show_result(estimate)
        else:
            console.print(
                f"{estimate.direction} {estimate.amount} {estimate.commodity.value}: "
                f"about {estimate.unit_price} RP each, {estimate.total} RP total"
            )
        return
    confirm_and_commit(session, ks, ks.preview("trade", direction, commodity, amount))


def handle_level_up(session: PromptSession, ks: KingdomSession, parts: list[str]) -> None:
    if len(parts) < 3:
        console.print("[red]Usage: levelup <ability> <skill> [feat][/red]")
        return
    if not ks.engine.check_level_up(ks.kingdom):
        console.print(
            f"[yellow]{ks.engine.xp_to_next_level(ks.kingdom)} XP short of the next level; levelling anyway.[/yellow]"
        )
    feat = parts[3] if len(parts) > 3 else None
    confirm_and_commit(session, ks, ks.preview("apply_level_up", parts[1], parts[2].title(), feat))


def handle_feats(ks: KingdomSession) -> None:
    level = ks.kingdom.level + 1
    feats = ks.engine.available_feats(ks.kingdom, level)
    if not feats:
        console.print("[dim]No feats available[/dim]")
        return
    for feat in feats:
        console.print(f"[bold cyan]{feat.id}[/bold cyan] (level {feat.level}): {feat.benefit}")


def handle_history(kingdom: Kingdom) -> None:
    if not kingdom.history:
        console.print("[dim]No turns completed yet[/dim]")
        return
    for entry in kingdom.history:
        console.print(entry.summary())
        if entry.activities:
            console.print(f"  [dim]Activities: {', '.join(entry.activities)}[/dim]")
        if entry.events:
            console.print(f"  [dim]Events: {', '.join(entry.events)}[/dim]")


def main():
    """Main entry point."""
    settings = EngineSettings.from_env()
    setup_logging(settings.log_level, console=console)
    settings.history_dir.mkdir(parents=True, exist_ok=True)

    engine = KingdomEngine(settings=settings)
    ks = KingdomSession(engine, starter_kingdom(settings.kingdom_name, engine.catalog))

    console.print(Panel(
        f"[bold magenta]{ks.kingdom.name}[/bold magenta]\n"
        "[dim]Rule the kingdom one turn at a time[/dim]",
        border_style="magenta",
    ))

    session = PromptSession(
        history=FileHistory(str(settings.history_dir / "command_history")),
        auto_suggest=AutoSuggestFromHistory(),
    )

    console.print("\n[dim]Type 'help' for commands[/dim]\n")

    while True:
        try:
            command = session.prompt(f"[{ks.kingdom.turn_state.phase.value}] > ")

            if not command.strip():
                continue

            parts = command.strip().split()
            cmd = parts[0].lower()

            if cmd in ("quit", "exit"):
                console.print("[dim]Long live the kingdom.[/dim]")
                break

            elif cmd == "help":
                print_help()

            elif cmd == "status":
                show_status(ks.kingdom)

            elif cmd == "skills":
                show_skills(engine, ks.kingdom)

            elif cmd == "hexes":
                show_hexes(ks.kingdom)

            elif cmd == "activities":
                category = parts[1] if len(parts) > 1 else None
                if category and category.lower() not in [c.value for c in ActivityCategory]:
                    console.print(f"[red]Unknown category: {category}[/red]")
                    continue
                show_activities(engine, ks.kingdom, category)

            elif cmd == "feats":
                handle_feats(ks)

            elif cmd == "history":
                handle_history(ks.kingdom)

            elif cmd == "upkeep":
                confirm_and_commit(session, ks, ks.preview("upkeep"))

            elif cmd == "estimate":
                handle_trade(session, ks, parts, estimate_only=True)

            elif cmd == "trade":
                handle_trade(session, ks, parts)

            elif cmd == "taxes":
                confirm_and_commit(session, ks, ks.preview("commerce"))

            elif cmd == "do":
                handle_activity(session, ks, parts)

            elif cmd == "done":
                confirm_and_commit(session, ks, ks.preview("finish_activities"))

            elif cmd == "event":
                confirm_and_commit(session, ks, ks.preview("event"))

            elif cmd == "end":
                confirm_and_commit(session, ks, ks.preview("end_turn"))

            elif cmd == "levelup":
                handle_level_up(session, ks, parts)

            elif cmd == "train":
                if len(parts) < 2:
                    console.print("[red]Usage: train <skill>[/red]")
                    continue
                confirm_and_commit(session, ks, ks.preview("train_skill_with_rp", parts[1].title()))

            else:
                console.print(f"[red]Unknown command: {cmd}[/red] [dim](try 'help')[/dim]")

        except KeyboardInterrupt:
            console.print("\n[dim]Type 'quit' to exit[/dim]")

        except EOFError:
            console.print("\n[dim]Long live the kingdom.[/dim]")
            break

        except Exception as e:
            logger.exception("Command failed")
            console.print(f"[red]Error: {e}[/red]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
