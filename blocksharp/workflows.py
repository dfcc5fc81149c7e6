"""
Computation expressions. A `comp_builder` block names a builder and holds two lambdas,
one for Bind and one for Return. In F# that becomes a little class and an instance of it.
A `comp_workflow` block then writes `name { ... }` around a stack of let!/return/do! statements.

The builder's shape, for propagation purposes, is just its name and which members it has.
The workflow blocks only carry the name, so mostly what propagates is renaming.
"""
import xml.etree.ElementTree as ET
from typing import NamedTuple, Optional
from .graph import Node, Workspace
from .names import Category
from .registry import Registry, template
from .mutation import bool_text
from . import procedures
from .type_model import NULL

STATEMENT_KINDS = ('comp_let', 'comp_return', 'comp_return_bang', 'comp_do')

class ComputationExpressionDef(NamedTuple):
	name: str
	bind_body: Optional[Node]
	return_body: Optional[Node]

class WorkflowRegistry(Registry):
	category = Category.COMPUTATION_EXPRESSION
	definition_kinds = {'comp_builder':'describe_builder'}
	usage_kinds = {'comp_workflow':'NAME'}

	def describe_builder(self, node:Node) -> ComputationExpressionDef:
		return ComputationExpressionDef(node.field('NAME') or '', node.child('BIND'), node.child('RETURN'))

	def set_name(self, node:Node, name:str):
		node.set_field('NAME', name)

	def descriptor(self, node:Node) -> ET.Element:
		builder = self.describe_builder(node)
		return ET.Element(
			'mutation', name=builder.name,
			bind=bool_text(builder.bind_body is not None),
			returns=bool_text(builder.return_body is not None),
		)

	def usage_descriptor(self, usage:Node) -> ET.Element:
		return ET.Element('mutation', name=usage.field('NAME') or '')

	def apply(self, usage:Node, descriptor:ET.Element) -> list[Node]:
		usage.set_field('NAME', descriptor.get('name'))
		return []

	def toolbox(self, workspace:Workspace) -> list[ET.Element]:
		builder = template('comp_builder')
		for slot, signature in (('BIND', (('m', 'm'), ('f', 'f'))), ('RETURN', (('x', 'x'),))):
			value = ET.SubElement(builder, 'value', name=slot)
			mutation = ET.Element('mutation', name='', isRec='false', statements='false')
			for name, pid in signature:
				arg = ET.SubElement(mutation, 'arg', name=name, paramId=pid)
				ET.SubElement(arg, 'type', type='null')
			value.append(template('procedures_anonymous', mutation))
		found = [builder]
		found.extend(template(kind) for kind in STATEMENT_KINDS)
		for d in self.list_all(workspace):
			found.append(template('comp_workflow', ET.Element('mutation', name=d.name)))
		return found

WORKFLOWS = WorkflowRegistry()

def new_builder(workspace:Workspace, name:str) -> Node:
	""" A builder with untyped Bind(m, f) and Return(x) lambdas, ready to fill in. """
	node = workspace.new_node('comp_builder')
	node.fields['NAME'] = WORKFLOWS.reserve(name, workspace, node)
	node.add_input('BIND')
	node.add_input('RETURN')
	node.connect('BIND', procedures.new_anonymous(workspace, [('m', NULL), ('f', NULL)]))
	node.connect('RETURN', procedures.new_anonymous(workspace, [('x', NULL)]))
	return node

def new_workflow(workspace:Workspace, builder:Node) -> Node:
	node = workspace.new_node('comp_workflow', NAME=WORKFLOWS.describe(builder).name)
	node.add_input('BODY', statement=True)
	return node
