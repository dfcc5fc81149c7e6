"""
The block graph, as far as the generator is concerned.

A real editor owns its blocks: it renders them, drags them around, and keeps an undo history.
None of that is my business here. What the core needs is a walkable graph of nodes,
each with a kind, some fields, some input slots, and possibly a next-statement.
This module is that graph and not one bit more. The editor's own block objects
can stand behind the same interface; for tests and the command line, these will do.

Nodes do not carry behavior. Everything a node "can do" (describe a definition,
name a usage, rename its references) is looked up by kind in the registries.
That way there is exactly one place to look for what a given kind of node means.
"""
from contextlib import contextmanager
from itertools import count
from typing import NamedTuple, Any, Optional, Iterator, Callable

class ChangeEvent(NamedTuple):
	node_id: str
	element: str  # 'mutation', 'field', 'move', ...
	old_value: Any
	new_value: Any
	record_undo: bool

class Slot:
	""" One named input on a node. Holds at most one child. """
	__slots__ = ('name', 'statement', 'target')
	def __init__(self, name:str, statement:bool):
		self.name = name
		self.statement = statement
		self.target = None
	def __repr__(self): return "<Slot %s%s>"%(self.name, " (statement)" if self.statement else "")

class Node:
	def __init__(self, workspace:"Workspace", kind:str, node_id:str):
		self.workspace = workspace
		self.kind = kind
		self.id = node_id
		self.fields = {}
		self.inputs = {}
		self.next:Optional["Node"] = None
		self.parent:Optional["Node"] = None
		self.comment:Optional[str] = None
		self.disabled = False
		self.warning:Optional[str] = None
		self.state = {}

	def __repr__(self): return "<%s %s>"%(self.kind, self.id)

	def field(self, name:str, default=None):
		return self.fields.get(name, default)

	def set_field(self, name:str, value):
		old = self.fields.get(name)
		self.fields[name] = value
		if old != value:
			self.workspace.fire(self, 'field', old, value)

	def add_input(self, name:str, statement=False) -> Slot:
		assert name not in self.inputs, (self, name)
		slot = self.inputs[name] = Slot(name, statement)
		return slot

	def remove_input(self, name:str) -> Optional["Node"]:
		""" Drop the slot; whatever was plugged in becomes a top-level node. """
		orphan = self.disconnect(name)
		del self.inputs[name]
		return orphan

	def input_names(self, prefix:str="") -> list[str]:
		return [name for name in self.inputs if name.startswith(prefix)]

	def child(self, name:str) -> Optional["Node"]:
		slot = self.inputs.get(name)
		return slot.target if slot else None

	def children(self) -> Iterator["Node"]:
		""" Directly-attached input children, in slot order. Does not include next. """
		for slot in self.inputs.values():
			if slot.target is not None:
				yield slot.target

	def connect(self, name:str, child:"Node"):
		slot = self.inputs[name]
		if slot.target is child: return
		self.disconnect(name)
		child.unplug()
		slot.target = child
		child.parent = self
		self.workspace.fire(child, 'move', None, self.id)

	def disconnect(self, name:str) -> Optional["Node"]:
		slot = self.inputs[name]
		child = slot.target
		if child is not None:
			slot.target = None
			child.parent = None
			self.workspace.fire(child, 'move', self.id, None)
		return child

	def set_next(self, child:Optional["Node"]):
		if self.next is not None:
			former, self.next = self.next, None
			former.parent = None
			self.workspace.fire(former, 'move', self.id, None)
		if child is not None:
			child.unplug()
			self.next = child
			child.parent = self
			self.workspace.fire(child, 'move', None, self.id)

	def unplug(self):
		""" Detach this node (and everything below it) from wherever it sits. """
		parent = self.parent
		if parent is None: return
		if parent.next is self:
			parent.next = None
			self.parent = None
			self.workspace.fire(self, 'move', parent.id, None)
			return
		for slot in parent.inputs.values():
			if slot.target is self:
				parent.disconnect(slot.name)
				return
		raise AssertionError("Parent link without a matching connection", self, parent)

	def chain(self) -> Iterator["Node"]:
		""" This node followed by everything hanging off its next-links. """
		node = self
		while node is not None:
			yield node
			node = node.next

	def descendants(self) -> Iterator["Node"]:
		yield self
		for child in self.children():
			yield from child.descendants()
		if self.next is not None:
			yield from self.next.descendants()

	def is_value_child(self) -> bool:
		""" Plugged into a parent's value slot, as opposed to chained or free-standing. """
		parent = self.parent
		if parent is None or parent.next is self: return False
		return not any(slot.statement for slot in parent.inputs.values() if slot.target is self)

	def surround_parent(self) -> Optional["Node"]:
		"""
		The node this one is nested inside, skipping over previous statements.
		A statement's parent link points at the statement before it;
		that isn't what encloses it.
		"""
		node = self
		while node.parent is not None:
			if node.parent.next is node:
				node = node.parent
			else:
				return node.parent
		return None

	def ancestors(self) -> Iterator["Node"]:
		node = self.surround_parent()
		while node is not None:
			yield node
			node = node.surround_parent()


class Workspace:
	"""
	Owns the nodes, the listeners, and the undo stack.

	Undo-recording can be switched off for a scope with `undo_suppressed()`.
	Events fired in that scope still reach every listener;
	they just don't land on the undo stack.
	"""
	def __init__(self):
		self._nodes:list[Node] = []
		self._serial = count(1)
		self._listeners:list[Callable[[ChangeEvent], None]] = []
		self.record_undo = True
		self.undo_stack:list[ChangeEvent] = []

	def new_id(self, prefix:str) -> str:
		return "%s_%d"%(prefix, next(self._serial))

	def new_node(self, kind:str, node_id:Optional[str]=None, **fields) -> Node:
		if node_id is None:
			node_id = self.new_id(kind)
		node = Node(self, kind, node_id)
		node.fields.update(fields)
		self._nodes.append(node)
		self.fire(node, 'create', None, kind)
		return node

	def dispose(self, node:Node):
		node.unplug()
		doomed = {id(n) for n in node.descendants()}
		self._nodes = [n for n in self._nodes if id(n) not in doomed]

	def node_by_id(self, node_id:str) -> Optional[Node]:
		for node in self._nodes:
			if node.id == node_id:
				return node

	def top_nodes(self) -> list[Node]:
		return [node for node in self._nodes if node.parent is None]

	def get_all_nodes(self, include_disabled=False) -> list[Node]:
		found = []
		def walk(node:Node):
			if node.disabled and not include_disabled: return
			found.append(node)
			for child in node.children():
				walk(child)
			if node.next is not None:
				walk(node.next)
		for top in self.top_nodes():
			walk(top)
		return found

	def get_nodes_by_kind(self, kind:str) -> list[Node]:
		return [node for node in self.get_all_nodes(include_disabled=True) if node.kind == kind]

	# Notification plumbing

	def add_change_listener(self, listener:Callable[[ChangeEvent], None]):
		self._listeners.append(listener)

	def remove_change_listener(self, listener:Callable[[ChangeEvent], None]):
		self._listeners.remove(listener)

	def fire(self, node:Node, element:str, old_value, new_value) -> ChangeEvent:
		event = ChangeEvent(node.id, element, old_value, new_value, self.record_undo)
		if self.record_undo:
			self.undo_stack.append(event)
		for listener in list(self._listeners):
			listener(event)
		return event

	@contextmanager
	def undo_suppressed(self):
		prior = self.record_undo
		self.record_undo = False
		try: yield self
		finally: self.record_undo = prior

