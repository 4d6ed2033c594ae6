"""Cash flow Sankey presentation logic for the Streamlit UI.

Pure transformations from a ``CashFlowStatement`` to a Sankey model and a
Plotly figure. The UI loads the statement, keeps ``SankeyState`` in
``st.session_state`` and applies click events to it.

The layout has three columns:
    Inflows -> Cash -> Outflows
Each side starts grouped by activity (Operating, Investing, Financing);
clicking an activity expands it into its line items. A ``Surplus`` node
absorbs a positive net change and an optional ``Deficit`` node feeds a
negative one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal
from typing import TYPE_CHECKING

from affiliate_ledger.domain.models import CashFlowSection, CashFlowStatement

if TYPE_CHECKING:  # pragma: no cover
    import plotly.graph_objects as go


LEFT_PREFIX = "L:"
MIDDLE_PREFIX = "M:"
RIGHT_PREFIX = "R:"

MIDDLE_LABEL = "Cash"
SURPLUS_LABEL = "Surplus"
DEFICIT_LABEL = "Deficit"

MIDDLE_KEY = f"{MIDDLE_PREFIX}CASH"
SURPLUS_KEY = f"{RIGHT_PREFIX}SURPLUS"
DEFICIT_KEY = f"{LEFT_PREFIX}DEFICIT"

PATH_SEPARATOR = ":"


@dataclass
class SankeyState:
    """Drill-down state for the cash flow Sankey.

    Attributes:
        expanded_left: Activities whose inflow lines are shown.
        expanded_right: Activities whose outflow lines are shown.
        allow_negative_diff: Show a ``Deficit`` node for a negative net
            change.
        last_clicked_side: Side ("L"/"R") of the last clicked node.
        last_clicked_root: Activity of the last clicked node.
    """

    expanded_left: set[str] = field(default_factory=set)
    expanded_right: set[str] = field(default_factory=set)
    allow_negative_diff: bool = False
    last_clicked_side: Literal["L", "R"] | None = None
    last_clicked_root: str | None = None

    def reset_all(self) -> None:
        """Collapse every activity."""
        self.expanded_left.clear()
        self.expanded_right.clear()
        self.last_clicked_side = None
        self.last_clicked_root = None

    def reset_last_branch(self) -> None:
        """Collapse only the last clicked activity (if any)."""
        if not self.last_clicked_side or not self.last_clicked_root:
            return
        if self.last_clicked_side == "L":
            self.expanded_left.discard(self.last_clicked_root)
        else:
            self.expanded_right.discard(self.last_clicked_root)


@dataclass(frozen=True)
class SankeyLink:
    """Sankey link edge."""

    source: int
    target: int
    value: Decimal


@dataclass(frozen=True)
class SankeyModel:
    """Model used by the UI to render a Sankey with stable indices."""

    node_labels: list[str]
    node_keys: list[str]
    links: list[SankeyLink]
    key_by_index: dict[int, str]
    side_by_key: dict[str, Literal["L", "M", "R"]]
    root_by_key: dict[str, str | None]


def _sections(
    statement: CashFlowStatement,
) -> list[tuple[str, CashFlowSection]]:
    return [
        ("Operating", statement.operating),
        ("Investing", statement.investing),
        ("Financing", statement.financing),
    ]


def _group_lines(
    statement: CashFlowStatement,
    *,
    outflows: bool,
    expanded: set[str],
) -> list[tuple[str, Decimal, str]]:
    """Return (group, amount, activity) triples in statement order.

    Zero lines are skipped; an expanded activity yields one group per line
    label, otherwise a single group for the whole activity.
    """
    order: list[str] = []
    totals: dict[str, Decimal] = {}
    root_by_group: dict[str, str] = {}
    for activity, section in _sections(statement):
        lines = section.outflows if outflows else section.inflows
        for line in lines:
            if line.amount <= 0:
                continue
            group = (
                f"{activity}{PATH_SEPARATOR}{line.label}"
                if activity in expanded
                else activity
            )
            if group not in totals:
                order.append(group)
                totals[group] = line.amount
                root_by_group[group] = activity
            else:
                totals[group] += line.amount
    return [(group, totals[group], root_by_group[group]) for group in order]


def _add_node(
    *,
    node_keys: list[str],
    node_labels: list[str],
    side_by_key: dict[str, Literal["L", "M", "R"]],
    root_by_key: dict[str, str | None],
    key: str,
    label: str,
    side: Literal["L", "M", "R"],
    root: str | None,
) -> int:
    if key in side_by_key:
        return node_keys.index(key)
    node_keys.append(key)
    node_labels.append(label)
    side_by_key[key] = side
    root_by_key[key] = root
    return len(node_keys) - 1


def build_sankey_model(
    statement: CashFlowStatement,
    state: SankeyState,
) -> SankeyModel:
    """Build a stable Sankey model from a cash flow statement.

    Args:
        statement: Cash flow statement of the period.
        state: Drill-down state controlling grouping.

    Returns:
        SankeyModel: Nodes, links, and metadata for click decoding.
    """
    incoming = _group_lines(
        statement, outflows=False, expanded=state.expanded_left
    )
    outgoing = _group_lines(
        statement, outflows=True, expanded=state.expanded_right
    )

    node_labels: list[str] = []
    node_keys: list[str] = []
    side_by_key: dict[str, Literal["L", "M", "R"]] = {}
    root_by_key: dict[str, str | None] = {}
    nodes = dict(
        node_keys=node_keys,
        node_labels=node_labels,
        side_by_key=side_by_key,
        root_by_key=root_by_key,
    )

    left_index = {
        group: _add_node(
            **nodes,
            key=f"{LEFT_PREFIX}{group}",
            label=group,
            side="L",
            root=root,
        )
        for group, _amount, root in incoming
    }
    middle_index = _add_node(
        **nodes,
        key=MIDDLE_KEY,
        label=MIDDLE_LABEL,
        side="M",
        root=None,
    )
    right_index = {
        group: _add_node(
            **nodes,
            key=f"{RIGHT_PREFIX}{group}",
            label=group,
            side="R",
            root=root,
        )
        for group, _amount, root in outgoing
    }

    links: list[SankeyLink] = []
    for group, amount, _root in incoming:
        links.append(
            SankeyLink(
                source=left_index[group], target=middle_index, value=amount
            )
        )
    for group, amount, _root in outgoing:
        links.append(
            SankeyLink(
                source=middle_index, target=right_index[group], value=amount
            )
        )

    diff = statement.net_change
    if diff > 0:
        surplus_index = _add_node(
            **nodes,
            key=SURPLUS_KEY,
            label=SURPLUS_LABEL,
            side="R",
            root=None,
        )
        links.append(
            SankeyLink(source=middle_index, target=surplus_index, value=diff)
        )
    if diff < 0 and state.allow_negative_diff:
        deficit_index = _add_node(
            **nodes,
            key=DEFICIT_KEY,
            label=DEFICIT_LABEL,
            side="L",
            root=None,
        )
        links.append(
            SankeyLink(
                source=deficit_index,
                target=middle_index,
                value=abs(diff),
            )
        )

    return SankeyModel(
        node_labels=node_labels,
        node_keys=node_keys,
        links=links,
        key_by_index=dict(enumerate(node_keys)),
        side_by_key=side_by_key,
        root_by_key=root_by_key,
    )


def build_plotly_figure(model: SankeyModel) -> "go.Figure":
    """Build a Plotly Sankey figure from a Sankey model.

    Args:
        model: Precomputed Sankey model.

    Returns:
        Plotly figure ready to be displayed in Streamlit.
    """
    sides = [model.side_by_key.get(key, "M") for key in model.node_keys]
    left_count = sides.count("L")
    right_count = sides.count("R")

    node_x: list[float] = []
    node_y: list[float] = []
    left_seen = 0
    right_seen = 0
    for side in sides:
        if side == "L":
            node_x.append(0.02)
            node_y.append((left_seen + 1) / (left_count + 1))
            left_seen += 1
        elif side == "R":
            node_x.append(0.98)
            node_y.append((right_seen + 1) / (right_count + 1))
            right_seen += 1
        else:
            node_x.append(0.5)
            node_y.append(0.5)

    import plotly.graph_objects as go

    fig = go.Figure(
        data=[
            go.Sankey(
                arrangement="snap",
                node=dict(
                    pad=10,
                    thickness=12,
                    label=model.node_labels,
                    x=node_x,
                    y=node_y,
                    line=dict(color="rgba(0,0,0,0.25)", width=0.5),
                ),
                link=dict(
                    source=[link.source for link in model.links],
                    target=[link.target for link in model.links],
                    value=[float(link.value) for link in model.links],
                ),
                textfont=dict(size=12),
            )
        ]
    )
    fig.update_layout(
        margin=dict(l=8, r=8, t=8, b=8),
        height=560,
    )
    return fig


def apply_click(
    *,
    state: SankeyState,
    model: SankeyModel,
    node_index: int,
) -> bool:
    """Expand the activity behind a clicked node.

    Args:
        state: State to mutate.
        model: Model containing click metadata.
        node_index: Clicked node index.

    Returns:
        True if the state changed, otherwise False.
    """
    key = model.key_by_index.get(node_index)
    if not key:
        return False
    side = model.side_by_key.get(key)
    root = model.root_by_key.get(key)
    if side not in {"L", "R"} or not root:
        return False

    state.last_clicked_side = side
    state.last_clicked_root = root
    expanded = state.expanded_left if side == "L" else state.expanded_right
    if root in expanded:
        return False
    expanded.add(root)
    return True


__all__ = [
    "SankeyState",
    "SankeyLink",
    "SankeyModel",
    "build_sankey_model",
    "build_plotly_figure",
    "apply_click",
]
