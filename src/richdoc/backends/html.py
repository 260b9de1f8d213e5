"""HTML backend for rendering."""

from __future__ import annotations

from collections.abc import Sequence

from richdoc.models import MarkType
from richdoc.text import comment, escape_attr, escape_text

_MARK_TAGS = {
    MarkType.BOLD.value: "strong",
    MarkType.ITALIC.value: "em",
    MarkType.UNDERLINE.value: "u",
    MarkType.CODE.value: "code",
    MarkType.SUPERSCRIPT.value: "sup",
    MarkType.SUBSCRIPT.value: "sub",
}


def _class_attr(css_class: str | None) -> str:
    return f' class="{escape_attr(css_class)}"' if css_class else ""


class HtmlBackend:
    """Backend producing WordPress-friendly HTML fragments."""

    def escape(self, text: str) -> str:
        return escape_text(text)

    def mark(self, mark_type: str, content: str) -> str | None:
        tag = _MARK_TAGS.get(mark_type)
        if tag is None:
            return None
        return f"<{tag}>{content}</{tag}>"

    def paragraph(self, content: str, css_class: str | None = None) -> str:
        return f"<p{_class_attr(css_class)}>{content}</p>"

    def heading(
        self, level: int, content: str, anchor_id: str | None = None, css_class: str | None = None
    ) -> str:
        id_attr = f' id="{escape_attr(anchor_id)}"' if anchor_id is not None else ""
        return f"<h{level}{id_attr}{_class_attr(css_class)}>{content}</h{level}>"

    def division(self, content: str, css_class: str, element_id: str | None = None) -> str:
        id_attr = f' id="{escape_attr(element_id)}"' if element_id else ""
        return f"<div{_class_attr(css_class)}{id_attr}>\n{content}\n</div>"

    def list_block(self, items: Sequence[str], ordered: bool, css_class: str | None = None) -> str:
        tag = "ol" if ordered else "ul"
        body = "\n".join(items)
        return f"<{tag}{_class_attr(css_class)}>\n{body}\n</{tag}>"

    def list_item(self, content: str) -> str:
        return f"<li>{content}</li>"

    def blockquote(self, content: str) -> str:
        return f"<blockquote>\n{content}\n</blockquote>"

    def rule(self) -> str:
        return "<hr />"

    def link(self, url: str, content: str, *, new_tab: bool = False, css_class: str | None = None) -> str:
        attrs = f' href="{escape_attr(url)}"{_class_attr(css_class)}'
        if new_tab:
            attrs += ' target="_blank" rel="noopener noreferrer"'
        return f"<a{attrs}>{content}</a>"

    def table(self, rows: Sequence[str]) -> str:
        body = "\n".join(rows)
        return f'<table class="wp-block-table">\n<tbody>\n{body}\n</tbody>\n</table>'

    def table_row(self, cells: Sequence[str]) -> str:
        return f"<tr>{''.join(cells)}</tr>"

    def table_cell(self, content: str, *, header: bool, colspan: int | None, rowspan: int | None) -> str:
        tag = "th" if header else "td"
        attrs = ""
        if colspan and colspan > 1:
            attrs += f' colspan="{colspan}"'
        if rowspan and rowspan > 1:
            attrs += f' rowspan="{rowspan}"'
        return f"<{tag}{attrs}>{content}</{tag}>"

    def data_table(self, header: Sequence[str], rows: Sequence[Sequence[str]], css_class: str) -> str:
        parts = ['<div class="table-responsive">', f"<table{_class_attr(css_class)}>"]
        parts.append("<thead><tr>")
        parts.extend(f"<th>{escape_text(cell)}</th>" for cell in header)
        parts.append("</tr></thead>")
        parts.append("<tbody>")
        for row in rows:
            if not row:
                continue
            parts.append("<tr>")
            parts.extend(f"<td>{escape_text(cell)}</td>" for cell in row)
            parts.append("</tr>")
        parts.append("</tbody></table></div>")
        return "".join(parts)

    def figure(self, url: str, alt: str, caption: str | None) -> str:
        lines = ['<figure class="wp-block-image">', f'<img src="{escape_attr(url)}" alt="{escape_attr(alt)}" />']
        if caption:
            lines.append(f"<figcaption>{escape_text(caption)}</figcaption>")
        lines.append("</figure>")
        return "\n".join(lines)

    def placeholder(self, text: str) -> str:
        return comment(text)
