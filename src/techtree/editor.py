"""
Edit protocol for tech tree models.

TreeEditor is the only producer of new GraphModel values. It creates,
renames, retypes, re-relates and deletes nodes, keeping relation
references consistent when a title changes. Every operation swaps in a
brand-new model, so a model held by a caller never changes under it.

The editor is meant for a single active editor; callers must serialize
operations themselves.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

from .model import GraphModel, Node, NodeType, TechTreeError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Node {}"
DEFAULT_TYPE = NodeType.CORE_TECHNOLOGY


class EditError(TechTreeError):
    """Raised when an edit operation cannot be applied."""

    pass


class NodeNotFoundError(EditError, KeyError):
    """Raised when an operation names a node that is not in the model."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class NoActiveEditError(EditError):
    """Raised when committing without a node being edited."""

    pass


class InternalInvariantError(TechTreeError):
    """Raised when the editor cannot keep one of its own guarantees."""

    pass


@dataclass(frozen=True)
class EditRecord:
    """
    One applied edit.

    Attributes:
        operation: ``create``, ``commit``, ``delete`` or ``cancel``.
        title: Title of the node the operation targeted.
        before: Model before the edit.
        after: Model after the edit.
    """

    operation: str
    title: str
    before: GraphModel
    after: GraphModel
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.operation}({self.title})"


def parse_relations(text: str) -> List[str]:
    """
    Split a comma separated relation field into titles.

    Surrounding whitespace is trimmed and empty entries are dropped, so
    ``"A, B,"`` gives ``["A", "B"]`` and ``""`` gives no relations.
    """
    return [part.strip() for part in text.split(",") if part.strip()]


def next_default_title(model: GraphModel, after_index: int) -> str:
    """
    Pick an unused ``"Node {k}"`` title for a node inserted after ``after_index``.

    Numbering starts at the 1-based position the new node will take and
    skips every number whose title is already present anywhere in the model.

    Raises:
        InternalInvariantError: If no unused title is found.
    """
    titles = set(model.titles())
    start = after_index + 2
    # One more candidate than there are titles, so one of them is free
    for k in range(start, start + len(titles) + 1):
        title = DEFAULT_TITLE.format(k)
        if title not in titles:
            return title
    raise InternalInvariantError(
        f"Could not find an unused default title after index {after_index}"
    )


class TreeEditor:
    """
    Applies edits to a tech tree model.

    Attributes:
        model: The current model. Replaced, never mutated, by each edit.
        editing_id: Derived id of the node being edited, if any.
        is_new_node: Whether the edited node was created and not committed.
        made_changes: Whether any change has been committed or deleted.
        history: Applied edits in order.

    Example:
        >>> editor = TreeEditor(GraphModel([Node("A")]))
        >>> node = editor.create("A")
        >>> node.title
        'Node 2'
        >>> editor.commit("Gene Therapy", "longevity-tech", "A").id
        'gene-therapy'
    """

    def __init__(self, model: Optional[GraphModel] = None):
        self.model = model if model is not None else GraphModel()
        self.editing_id: Optional[str] = None
        self.is_new_node = False
        self.made_changes = False
        self.history: List[EditRecord] = []

    @property
    def editing_node(self) -> Optional[Node]:
        if self.editing_id is None:
            return None
        return self.model.find_by_id(self.editing_id)

    def _apply(self, operation: str, title: str, model: GraphModel) -> None:
        self.history.append(EditRecord(operation, title, self.model, model))
        self.model = model

    def _close_session(self) -> None:
        self.editing_id = None
        self.is_new_node = False

    def create(self, after_title: str) -> Node:
        """
        Insert a default node right after ``after_title`` and start editing it.

        The new node is a core technology that follows the anchor node.

        Args:
            after_title: Title of the anchor node

        Returns:
            The new node

        Raises:
            NodeNotFoundError: If no node has that title
        """
        index = self.model.index_of_title(after_title)
        if index is None:
            raise NodeNotFoundError(f"No node titled '{after_title}'")

        node = Node(
            title=next_default_title(self.model, index),
            type=DEFAULT_TYPE,
            relations=(after_title,),
        )
        self._apply("create", node.title, self.model.insert(index + 1, node))
        self.editing_id = node.id
        self.is_new_node = True
        logger.debug("Created '%s' after '%s'", node.title, after_title)
        return node

    def begin_edit(self, node_id: str) -> Node:
        """
        Start editing an existing node.

        Raises:
            NodeNotFoundError: If no node has that id
        """
        node = self.model.find_by_id(node_id)
        if node is None:
            raise NodeNotFoundError(f"No node with id '{node_id}'")
        self.editing_id = node_id
        self.is_new_node = False
        return node

    def commit(
        self,
        new_title: str,
        new_type: Union[NodeType, str],
        relations_csv: str,
        node_id: Optional[str] = None,
    ) -> Node:
        """
        Replace the edited node with new values.

        Relations elsewhere in the model that name the old title are
        rewritten to the new title. The node keeps its index.

        Args:
            new_title: New title; surrounding whitespace is trimmed
            new_type: NodeType, type value or display label
            relations_csv: Comma separated relation titles
            node_id: Node to commit, defaults to the node being edited

        Returns:
            The committed node

        Raises:
            ValidationError: If the title is empty or the type unknown. The
                edit session stays open.
            NoActiveEditError: If no node is given or being edited
            NodeNotFoundError: If the node is no longer in the model
        """
        node_id = node_id if node_id is not None else self.editing_id
        if node_id is None:
            raise NoActiveEditError("No node is being edited")

        index = self.model.index_of_id(node_id)
        if index is None:
            raise NodeNotFoundError(f"No node with id '{node_id}'")

        title = new_title.strip()
        if not title:
            raise ValidationError("Node title must not be empty")

        old = self.model[index]
        node = Node(
            title=title,
            type=NodeType.parse(new_type),
            relations=tuple(parse_relations(relations_csv)),
        )

        model = self.model
        if old.title != title:
            model = model.rename_relations(old.title, title, skip_index=index)
        self._apply("commit", title, model.replace_at(index, node))

        self.made_changes = True
        self._close_session()
        if old.title != title:
            logger.info("Renamed '%s' to '%s'", old.title, title)
        else:
            logger.info("Updated '%s'", title)
        return node

    def delete(self, title: str) -> None:
        """
        Remove the node with this title.

        Relations naming the deleted title are left as they are; the layout
        treats them as unmatched.

        Raises:
            NodeNotFoundError: If no node has that title
        """
        node = self.model.find_by_title(title)
        if node is None:
            raise NodeNotFoundError(f"No node titled '{title}'")

        self._apply("delete", title, self.model.without_title(title))
        self.made_changes = True
        if self.editing_id == node.id:
            self._close_session()
        logger.info("Deleted '%s'", title)

    def cancel_create(self, node_id: str) -> None:
        """Remove an uncommitted node created by create(), matched by id."""
        if self.model.index_of_id(node_id) is None:
            raise NodeNotFoundError(f"No node with id '{node_id}'")
        self._apply("cancel", node_id, self.model.without_id(node_id))
        if self.editing_id == node_id:
            self._close_session()
        logger.debug("Discarded new node '%s'", node_id)

    def cancel(self) -> None:
        """
        Leave edit mode for the current node.

        A node that was created and never committed is removed; an existing
        node is left unchanged.
        """
        if self.is_new_node and self.editing_id is not None:
            self.cancel_create(self.editing_id)
        self._close_session()
