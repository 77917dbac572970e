"""
Ideas from the global list and every project's IDEAS.md.

Status comes from the checkbox, overridden by tags:
- `#blocked:<reason>` -> blocked, `blocker` = reason
- `#done:<date>`      -> done, `doneDate` = date (wins over blocked)

`#project:<name>` re-routes the idea's source to the display name of the
project whose name or slug matches case-insensitively. Unmatched values
are used as given. The project tag is removed from the idea's tags.
"""

from constellation.core.aggregator.models import Idea, IdeaCounts, IdeaStatus
from constellation.core.parsing.checklist import parse_checklist
from constellation.core.parsing.models import ChecklistItem
from constellation.core.registry.loader import ProjectRegistry
from constellation.core.sources.reader import SourceReader

GLOBAL_SOURCE = "global"
IDEAS_FILE = "IDEAS.md"

BLOCKED_PREFIX = "blocked:"
DONE_PREFIX = "done:"
PROJECT_PREFIX = "project:"


def idea_from_item(item: ChecklistItem, source: str, registry: ProjectRegistry) -> Idea:
    """Apply checkbox state and tag overrides to one checklist item."""
    status = IdeaStatus.DONE if item.checked else IdeaStatus.OPEN
    blocker: str | None = None
    done_date: str | None = None
    tags: list[str] = []

    for tag in item.tags:
        lowered = tag.lower()
        if lowered.startswith(PROJECT_PREFIX):
            value = tag[len(PROJECT_PREFIX):]
            if value:
                project = registry.find(value)
                source = project.name if project is not None else value
            continue
        if lowered.startswith(BLOCKED_PREFIX):
            blocker = tag[len(BLOCKED_PREFIX):]
        elif lowered.startswith(DONE_PREFIX):
            done_date = tag[len(DONE_PREFIX):]
        tags.append(tag)

    if done_date is not None:
        status = IdeaStatus.DONE
    elif blocker is not None:
        status = IdeaStatus.BLOCKED

    return Idea(
        text=item.text,
        title=item.title,
        description=item.description,
        status=status,
        tags=tags,
        source=source,
        blocker=blocker,
        done_date=done_date,
    )


def parse_ideas(text: str | None, source: str, registry: ProjectRegistry) -> list[Idea]:
    return [idea_from_item(item, source, registry) for item in parse_checklist(text)]


def collect_ideas(reader: SourceReader, registry: ProjectRegistry) -> list[Idea]:
    """Global ideas first, then each project's ideas in registry order."""
    ideas = parse_ideas(reader.read_ideas(), GLOBAL_SOURCE, registry)
    for project in registry:
        text = reader.read_project_file(project, IDEAS_FILE)
        ideas.extend(parse_ideas(text, project.name, registry))
    return ideas


def count_ideas(ideas: list[Idea]) -> IdeaCounts:
    counts = IdeaCounts(total=len(ideas))
    for idea in ideas:
        if idea.status == IdeaStatus.OPEN:
            counts.open += 1
        elif idea.status == IdeaStatus.BLOCKED:
            counts.blocked += 1
        else:
            counts.done += 1
    return counts
