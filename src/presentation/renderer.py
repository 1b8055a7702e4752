"""Plain-text rendering of a search session.

Reads SessionState only; never calls back into the controller.
"""

from domain.model.lookup import Found, GroupedEntry, NotFound, RawPronunciation
from domain.model.session import SessionState, SessionStatus

TITLE = "Từ Điển Tiếng Việt"
EMPTY_MESSAGE = "Nhập từ cần tra cứu vào ô tìm kiếm ở trên."
LOADING_MESSAGE = "Đang tìm..."
ERROR_MESSAGE = "Đã xảy ra lỗi khi tìm kiếm. Vui lòng thử lại."
RETRY_HINT = "(gõ :retry để thử lại)"
NO_MEANINGS_MESSAGE = "Chưa có nghĩa cho mục này."
EXAMPLE_PREFIX = "Ví dụ: "


def not_found_message(term: str) -> str:
    return f'Không tìm thấy từ "{term}" trong từ điển.'


def render(state: SessionState) -> str:
    """Render the whole page for the current state."""
    lines = [f"# {TITLE}", ""]

    if state.status is SessionStatus.LOADING:
        lines.append(LOADING_MESSAGE)
    elif state.status is SessionStatus.ERRORED:
        lines.append(f"! {ERROR_MESSAGE} {RETRY_HINT}")
    elif isinstance(state.result, NotFound):
        lines.append(not_found_message(state.search_term))
    elif isinstance(state.result, Found):
        lines.extend(render_found(state))
    else:
        lines.append(EMPTY_MESSAGE)

    return "\n".join(lines).rstrip() + "\n"


def render_found(state: SessionState) -> list[str]:
    result = state.result
    lines = [f"## {result.word}"]

    if len(state.groups) > 1:
        lines.append(render_tabs(state.groups, state.active_tab_index))

    group = state.active_group
    if group is None:
        return lines

    expanded = state.active_tab_index in state.expanded_pronunciation_panels
    lines.extend(render_group(group, expanded))

    if state.suggestions:
        lines.append("")
        lines.append("Từ liên quan: " + ", ".join(state.suggestions))
    return lines


def render_tabs(groups: list[GroupedEntry], active: int) -> str:
    labels = []
    for i, group in enumerate(groups):
        name = group.entry.lang_name or group.entry.lang_code or str(i + 1)
        labels.append(f"[{name}]" if i == active else f" {name} ")
    return " | ".join(labels)


def _pronunciation(p: RawPronunciation) -> str:
    return f"/{p.ipa}/ ({p.region})" if p.region else f"/{p.ipa}/"


def render_group(group: GroupedEntry, pronunciations_expanded: bool = False) -> list[str]:
    """Render one result entry: pronunciations, meanings, translations, relations."""
    lines: list[str] = []

    if group.primary_pronunciation is not None:
        line = "Phát âm: " + _pronunciation(group.primary_pronunciation)
        if group.entry.audio:
            line += " ♪"
        lines.append(line)

    if group.secondary_pronunciations:
        marker = "▾" if pronunciations_expanded else "▸"
        lines.append(f"{marker} Cách phát âm khác ({len(group.secondary_pronunciations)})")
        if pronunciations_expanded:
            lines.extend(f"    {_pronunciation(p)}" for p in group.secondary_pronunciations)

    if not group.meanings_by_language:
        lines.append("")
        lines.append(NO_MEANINGS_MESSAGE)

    for language, by_pos in group.meanings_by_language.items():
        lines.append("")
        lines.append(f"### {language}")
        for pos, meanings in by_pos.items():
            lines.append(f"#### {pos}")
            for i, meaning in enumerate(meanings, start=1):
                prefix = f"{i}. "
                if meaning.sub_pos:
                    prefix += f"[{meaning.sub_pos}] "
                lines.append(prefix + meaning.definition)
                if meaning.example:
                    lines.append(f"   {EXAMPLE_PREFIX}{meaning.example}")

    if group.entry.translations:
        lines.append("")
        lines.append("Bản dịch:")
        lines.extend(
            f"  - {t.lang_name or t.lang_code}: {t.translation}"
            for t in group.entry.translations
        )

    if group.entry.relations:
        lines.append("")
        lines.append("Quan hệ:")
        lines.extend(
            f"  - {r.relation_type}: {r.related_word}" for r in group.entry.relations
        )

    return lines
