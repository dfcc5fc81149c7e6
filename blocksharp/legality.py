"""
Some blocks only make sense inside certain others: a `case` belongs in a `typedefinition`,
and `let!` and friends belong in a `comp_workflow`. Anywhere else, the block gets disabled
and carries a warning until it's moved somewhere sensible.

This is feedback for the person at the keyboard. The generator never asks;
it trusts disabled blocks to stay out of the way.
"""
from .graph import Node, Workspace, ChangeEvent
from .workflows import STATEMENT_KINDS

REQUIRED_CONTAINER = {'case':'typedefinition'}
REQUIRED_CONTAINER.update((kind, 'comp_workflow') for kind in STATEMENT_KINDS)

WARNINGS = {
	'typedefinition': "A case belongs inside a type definition.",
	'comp_workflow': "This statement belongs inside a computation expression.",
}

def is_legally_placed(node:Node) -> bool:
	container = REQUIRED_CONTAINER.get(node.kind)
	if container is None: return True
	return any(ancestor.kind == container for ancestor in node.ancestors())

def check_placement(node:Node) -> bool:
	""" Disable (and warn) or re-enable the node according to where it sits. Returns legality. """
	if node.kind not in REQUIRED_CONTAINER: return True
	legal = is_legally_placed(node)
	node.disabled = not legal
	node.warning = None if legal else WARNINGS[REQUIRED_CONTAINER[node.kind]]
	return legal

def check_workspace(workspace:Workspace):
	for node in workspace.get_all_nodes(include_disabled=True):
		check_placement(node)

def install(workspace:Workspace):
	""" Recheck every constrained block after each change to the graph. """
	def on_change(event:ChangeEvent):
		if event.element in ('move', 'create'):
			check_workspace(workspace)
	workspace.add_change_listener(on_change)
	check_workspace(workspace)
	return on_change
