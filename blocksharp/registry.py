"""
What the three definition registries have in common.

Datatypes, procedures, and computation-expression builders are all the same story
told with different nouns: some nodes define a thing by name, other nodes use it by name,
and when the definition's shape changes, the users need to hear about it.

There are no stored back-references. Every question ("who uses foo?") is answered by
scanning the workspace. Workspaces are small and this keeps the answers honest.

Capabilities are tables keyed by node kind. A node whose kind isn't in the table
simply doesn't have the capability; nobody goes poking around for methods.
"""
import xml.etree.ElementTree as ET
from typing import Optional, NamedTuple
from .graph import Node, Workspace
from .names import Category, names_equal, find_legal_name, UNNAMED
from . import mutation

class UnresolvedReference(LookupError):
	""" A usage names a definition that isn't there (anymore). """

def template(kind:str, mutation_element:Optional[ET.Element]=None, **fields) -> ET.Element:
	""" A toolbox entry: one block, perhaps pre-shaped, perhaps with preset fields. """
	block = ET.Element('block', type=kind)
	for name, value in fields.items():
		ET.SubElement(block, 'field', name=name).text = value
	if mutation_element is not None:
		block.append(mutation_element)
	return block

class Registry:
	category: Category
	# Kinds that may define something, mapped to a method name that describes one (or returns None).
	definition_kinds: dict[str, str] = {}
	# Kinds that use something by name, mapped to the field holding that name.
	usage_kinds: dict[str, str] = {}

	def __init__(self, unnamed:str=UNNAMED):
		self.unnamed = unnamed

	# Per-kind behavior, for subclasses:

	def descriptor(self, node:Node) -> ET.Element:
		""" The canonical structural snapshot of a definition. """
		raise NotImplementedError(type(self))

	def usage_descriptor(self, usage:Node) -> ET.Element:
		""" The shape a usage currently believes its definition has. """
		raise NotImplementedError(type(self))

	def apply(self, usage:Node, descriptor:ET.Element) -> list[Node]:
		"""
		Reshape a usage after a definition's descriptor.
		Returns any children that had to be detached.
		"""
		raise NotImplementedError(type(self))

	def set_name(self, node:Node, name:str):
		raise NotImplementedError(type(self))

	def toolbox(self, workspace:Workspace) -> list[ET.Element]:
		raise NotImplementedError(type(self))

	# Uniform behavior:

	def describe(self, node:Node):
		""" The definition this node stands for, or None if it stands for no definition right now. """
		method = self.definition_kinds.get(node.kind)
		return None if method is None else getattr(self, method)(node)

	def definitions(self, workspace:Workspace) -> list[tuple[Node, NamedTuple]]:
		found = []
		for node in workspace.get_all_nodes(include_disabled=True):
			it = self.describe(node)
			if it is not None:
				found.append((node, it))
		return found

	def list_all(self, workspace:Workspace) -> list:
		""" Every definition, sorted by name without regard to case. Ties keep scan order. """
		return sorted((d for _, d in self.definitions(workspace)), key=lambda d:d.name.casefold())

	def is_name_used(self, name:str, workspace:Workspace, exclude:Optional[Node]=None) -> bool:
		return any(
			names_equal(d.name, name)
			for node, d in self.definitions(workspace)
			if node is not exclude
		)

	def find_definition_node(self, name:str, workspace:Workspace) -> Optional[Node]:
		for node, d in self.definitions(workspace):
			if names_equal(d.name, name):
				return node

	def find_definition(self, name:str, workspace:Workspace):
		node = self.find_definition_node(name, workspace)
		return None if node is None else self.describe(node)

	def definition_of(self, name:str, workspace:Workspace):
		it = self.find_definition(name, workspace)
		if it is None:
			raise UnresolvedReference(self.category, name)
		return it

	def usage_name(self, node:Node) -> Optional[str]:
		field = self.usage_kinds.get(node.kind)
		return None if field is None else node.field(field)

	def find_usages(self, name:str, workspace:Workspace) -> list[Node]:
		found = []
		for node in workspace.get_all_nodes(include_disabled=True):
			used = self.usage_name(node)
			if used is not None and names_equal(used, name):
				found.append(node)
		return found

	def reserve(self, candidate:str, workspace:Workspace, exclude:Optional[Node]=None) -> str:
		return find_legal_name(candidate, lambda name: self.is_name_used(name, workspace, exclude), self.unnamed)

	def rename_usage(self, usage:Node, new_name:str):
		usage.set_field(self.usage_kinds[usage.kind], new_name)

	def rename(self, node:Node, proposed:str) -> str:
		"""
		The host calls this as the user edits a definition's name.
		Every usage gets the new name before this returns.
		"""
		old = self.describe(node).name
		legal = self.reserve(proposed, node.workspace, node)
		if old != legal:
			for usage in self.find_usages(old, node.workspace):
				if usage is not node:
					self.rename_usage(usage, legal)
			self.set_name(node, legal)
		return legal

	def propagate(self, node:Node, report=None) -> list:
		return mutation.propagate(self, node, report)

class VariableRegistry(Registry):
	"""
	Variables get defined by assignment blocks. They have no shape to propagate,
	but they do have names, and those names form a category of their own.
	"""
	category = Category.VARIABLE
	definition_kinds = {'variables_set':'describe_assignment'}
	usage_kinds = {'variables_get':'VAR', 'variables_set':'VAR'}

	class VariableDef(NamedTuple):
		name: str

	def describe_assignment(self, node:Node):
		return self.VariableDef(node.field('VAR') or '')

	def set_name(self, node:Node, name:str):
		node.set_field('VAR', name)

	def rename(self, node:Node, proposed:str) -> str:
		"""
		Unlike the others, several assignments may legitimately share a variable.
		Renaming one renames the variable everywhere, so only other variables count as collisions.
		"""
		old = node.field('VAR') or ''
		legal = find_legal_name(
			proposed,
			lambda name: not names_equal(name, old) and self.is_name_used(name, node.workspace),
			self.unnamed,
		)
		if old != legal:
			for usage in self.find_usages(old, node.workspace):
				self.rename_usage(usage, legal)
		return legal

	def toolbox(self, workspace:Workspace) -> list[ET.Element]:
		names = sorted({d.name for d in self.list_all(workspace)}, key=str.casefold)
		found = [template('variables_set', VAR=name) for name in names[:1]]
		found.extend(template('variables_get', VAR=name) for name in names)
		return found
