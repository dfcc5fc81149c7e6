"""
Algebraic datatypes: a `typedefinition` block with a stack of `case` blocks inside.

The shape of a datatype is never stored. Ask for it and it is read afresh from whatever
is connected right now: the type-parameter slots, the case blocks in the CASES stack,
and the type-blocks plugged into each case's field slots. Slot names double as stable ids.
A case's field slots are FIELD0, FIELD1, ... at creation, and removing FIELD0 does not
rename FIELD1. The same goes for the PARAM slots on the definition.

Two kinds of block use a datatype:
	`datatype` is the type itself, as a type-block, with one ARG slot per type parameter.
	`type_builder` constructs (or matches) one particular case, with one ARG slot per field.
"""
import xml.etree.ElementTree as ET
from itertools import count
from typing import NamedTuple, Iterable, Optional
from .graph import Node, Workspace
from .names import Category, find_legal_name, names_equal
from .registry import Registry, template
from .mutation import reshape_arguments
from . import type_model
from .type_model import FSType, poly_letter

class CaseDef(NamedTuple):
	name: str
	fields: tuple[FSType, ...]
	case_id: str

class AlgebraicDatatypeDef(NamedTuple):
	name: str
	type_param_count: int
	cases: tuple[CaseDef, ...]
	type_params: tuple[str, ...]

def _case_nodes(definition:Node) -> Iterable[Node]:
	first = definition.child('CASES')
	if first is None: return ()
	return [node for node in first.chain() if node.kind == 'case' and not node.disabled]

def describe_case(node:Node) -> CaseDef:
	fields = (type_model.from_fragment(node.child(name)) for name in node.input_names('FIELD'))
	return CaseDef(node.field('NAME') or '', tuple(t for t in fields if t is not type_model.NULL), node.id)

def _next_slot(node:Node, prefix:str) -> str:
	taken = [int(name[len(prefix):]) for name in node.input_names(prefix)]
	return prefix + str(max(taken, default=-1)+1)

class DatatypeRegistry(Registry):
	category = Category.ALGEBRAIC_DATATYPE
	definition_kinds = {'typedefinition':'describe_definition'}
	usage_kinds = {'datatype':'NAME', 'type_builder':'DATATYPE'}

	def describe_definition(self, node:Node) -> AlgebraicDatatypeDef:
		slots = node.input_names('PARAM')
		named = {}
		for name in slots:
			child = node.child(name)
			if child is not None and child.kind == 'type_poly' and child.field('NAME'):
				named[name] = child.field('NAME')
		# Unbound slots draw letters in slot order, passing over any a named slot already has.
		fresh = (letter for letter in map(poly_letter, count()) if letter not in named.values())
		params = [named[name] if name in named else next(fresh) for name in slots]
		cases = tuple(describe_case(case) for case in _case_nodes(node))
		return AlgebraicDatatypeDef(node.field('TYPENAME') or '', len(params), cases, tuple(params))

	def set_name(self, node:Node, name:str):
		node.set_field('TYPENAME', name)

	def rename_case(self, case:Node, proposed:str) -> str:
		""" Case names share one pool across all datatypes. Builders follow by case id. """
		workspace = case.workspace
		def is_used(name):
			return any(
				names_equal(other.field('NAME') or '', name)
				for other in workspace.get_nodes_by_kind('case')
				if other is not case
			)
		legal = find_legal_name(proposed, is_used, self.unnamed)
		case.set_field('NAME', legal)
		definition = enclosing_definition(case)
		if definition is not None:
			self.propagate(definition)
		return legal

	# Descriptors

	def descriptor(self, node:Node) -> ET.Element:
		adt = self.describe_definition(node)
		element = ET.Element('mutation', name=adt.name, items=str(adt.type_param_count))
		for slot in node.input_names('PARAM'):
			ET.SubElement(element, 'param', paramId=slot)
		for case_node, case in zip(_case_nodes(node), adt.cases):
			case_element = ET.SubElement(element, 'case', name=case.name, caseId=case.case_id)
			for slot in case_node.input_names('FIELD'):
				field = ET.SubElement(case_element, 'field', paramId=slot)
				child_type = type_model.from_fragment(case_node.child(slot))
				if child_type is not type_model.NULL:
					field.append(type_model.to_xml(child_type))
		return element

	def usage_descriptor(self, usage:Node) -> ET.Element:
		ids = usage.state.get('param_ids') or usage.input_names('ARG')
		if usage.kind == 'datatype':
			element = ET.Element('mutation', name=usage.field('NAME') or '', items=str(len(ids)))
			tag = 'param'
		else:
			element = ET.Element('mutation', name=usage.field('NAME') or '', datatype=usage.field('DATATYPE') or '')
			if usage.state.get('case_id'):
				element.set('caseId', usage.state['case_id'])
			tag = 'field'
		for pid in ids:
			ET.SubElement(element, tag, paramId=pid)
		return element

	def apply(self, usage:Node, descriptor:ET.Element) -> list[Node]:
		if usage.kind == 'datatype':
			usage.set_field('NAME', descriptor.get('name'))
			return reshape_arguments(usage, [p.get('paramId') for p in descriptor.findall('param')])
		case = _find_case(descriptor, usage.state.get('case_id'), usage.field('NAME'))
		if case is None:
			return []
		usage.set_field('DATATYPE', descriptor.get('name'))
		usage.set_field('NAME', case.get('name'))
		usage.state['case_id'] = case.get('caseId')
		return reshape_arguments(usage, [f.get('paramId') for f in case.findall('field')])

	# Toolbox

	def toolbox(self, workspace:Workspace) -> list[ET.Element]:
		found = [template('typedefinition'), template('case')]
		for node, adt in sorted(self.definitions(workspace), key=lambda pair:pair[1].name.casefold()):
			descriptor = self.descriptor(node)
			usage = ET.Element('mutation', name=adt.name, items=str(adt.type_param_count))
			usage.extend(descriptor.findall('param'))
			found.append(template('datatype', usage))
			for case in descriptor.findall('case'):
				builder = ET.Element('mutation', name=case.get('name'), datatype=adt.name, caseId=case.get('caseId'))
				builder.extend(case.findall('field'))
				found.append(template('type_builder', builder))
		return found

def _find_case(descriptor:ET.Element, case_id:Optional[str], name:Optional[str]) -> Optional[ET.Element]:
	cases = descriptor.findall('case')
	for case in cases:
		if case_id and case.get('caseId') == case_id:
			return case
	if not case_id and name:
		for case in cases:
			if names_equal(case.get('name'), name):
				return case

def enclosing_definition(node:Node) -> Optional[Node]:
	for ancestor in node.ancestors():
		if ancestor.kind == 'typedefinition':
			return ancestor

DATATYPES = DatatypeRegistry()

###############################################################################
# Shape edits. The mutator dialog is the host's; these are the edits it performs.
# None of them propagate: call DATATYPES.propagate(definition) when done.

def new_definition(workspace:Workspace, name:str, type_param_count:int=0) -> Node:
	node = workspace.new_node('typedefinition')
	node.fields['TYPENAME'] = DATATYPES.reserve(name, workspace, node)
	for _ in range(type_param_count):
		add_type_param(node)
	node.add_input('CASES', statement=True)
	return node

def add_type_param(definition:Node) -> str:
	slot = _next_slot(definition, 'PARAM')
	definition.add_input(slot)
	if 'CASES' in definition.inputs:
		# Keep the statement input last.
		definition.inputs['CASES'] = definition.inputs.pop('CASES')
	return slot

def remove_type_param(definition:Node, slot:str) -> Optional[Node]:
	return definition.remove_input(slot)

def add_case(definition:Node, name:str, fields:Iterable[FSType]=()) -> Node:
	workspace = definition.workspace
	case = workspace.new_node('case', NAME=name)
	for t in fields:
		add_field(case, t)
	first = definition.child('CASES')
	if first is None:
		definition.connect('CASES', case)
	else:
		*_, last = first.chain()
		last.set_next(case)
	return case

def remove_case(case:Node):
	""" Take a case out of its stack, closing the gap behind it. """
	rest = case.next
	if rest is not None:
		case.set_next(None)
	parent = case.parent
	case.unplug()
	if rest is not None and parent is not None:
		if parent.kind == 'typedefinition':
			parent.connect('CASES', rest)
		else:
			parent.set_next(rest)

def add_field(case:Node, t:FSType) -> str:
	slot = _next_slot(case, 'FIELD')
	case.add_input(slot)
	fragment = type_model.to_fragment(case.workspace, t)
	if fragment is not None:
		case.connect(slot, fragment)
	return slot

def remove_field(case:Node, slot:str):
	fragment = case.remove_input(slot)
	if fragment is not None:
		case.workspace.dispose(fragment)

# Usages, as the toolbox would instantiate them.

def new_type_usage(workspace:Workspace, definition:Node) -> Node:
	node = workspace.new_node('datatype', NAME=DATATYPES.describe(definition).name)
	DATATYPES.apply(node, DATATYPES.descriptor(definition))
	return node

def new_builder(workspace:Workspace, case:Node) -> Node:
	definition = enclosing_definition(case)
	node = workspace.new_node('type_builder', NAME=case.field('NAME'), DATATYPE=definition.field('TYPENAME'))
	node.state['case_id'] = case.id
	DATATYPES.apply(node, DATATYPES.descriptor(definition))
	return node
