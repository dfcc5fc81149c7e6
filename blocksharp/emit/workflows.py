"""
Computation expressions. The builder becomes a class with Bind and Return members
(their bodies lifted from the two lambdas on the builder block) and a default instance:

	type MaybeBuilder() =
	    member this.Bind(m, f) =
	        ...
	    member this.Return(x) =
	        ...

	let maybe = new MaybeBuilder()

A workflow block then reads `maybe { ... }` around its let!/return/do! statements.
"""
from typing import Optional
from ..generator import emitter, Order, Generation, BUILDER_KEY
from ..graph import Node
from ..names import Category
from ..procedures import PROCEDURES
from ..registry import UnresolvedReference
from ..workflows import WORKFLOWS
from .procedures import procedure_body, NOT_IMPLEMENTED

def builder_type_name(name:str) -> str:
	return name[:1].upper() + name[1:] + 'Builder'

def _member(gen:Generation, member:str, lambda_node:Optional[Node], default_params:str) -> str:
	inner = gen.indent * 2
	if lambda_node is None or lambda_node.kind != 'procedures_anonymous':
		return '%smember this.%s(%s) =\n%s%s\n'%(gen.indent, member, default_params, inner, NOT_IMPLEMENTED)
	proc = PROCEDURES.describe_anonymous(lambda_node)
	params = ', '.join(gen.name(p.display_name, Category.VARIABLE) for p in proc.parameters)
	head = '%smember this.%s(%s) =\n'%(gen.indent, member, params)
	return head + procedure_body(gen, lambda_node, proc, inner)

@emitter('comp_builder')
def comp_builder(gen:Generation, node:Node):
	builder = WORKFLOWS.describe_builder(node)
	instance = gen.name(builder.name, Category.COMPUTATION_EXPRESSION)
	type_name = gen.name(builder_type_name(builder.name), Category.ALGEBRAIC_DATATYPE)
	code = 'type %s() =\n'%type_name
	code += _member(gen, 'Bind', builder.bind_body, 'm, f')
	code += _member(gen, 'Return', builder.return_body, 'x')
	code += '\nlet %s = new %s()\n'%(instance, type_name)
	gen.define(BUILDER_KEY+instance, gen.scrub(node, code, this_only=True))
	return None

@emitter('comp_workflow')
def comp_workflow(gen:Generation, node:Node):
	instance = gen.name(node.field('NAME') or '', Category.COMPUTATION_EXPRESSION)
	try: WORKFLOWS.definition_of(node.field('NAME') or '', gen.workspace)
	except UnresolvedReference:
		gen.report.unresolved_reference(node.id, 'computation expression', node.field('NAME'))
	body = gen.statement_to_code(node, 'BODY') if 'BODY' in node.inputs else ''
	code = '%s {\n%s}'%(instance, body)
	# Statement or expression, according to where it sits.
	if node.is_value_child():
		return code, Order.ATOMIC
	return code + '\n'

@emitter('comp_let')
def comp_let(gen:Generation, node:Node):
	name = gen.name(node.field('VAR') or '', Category.VARIABLE)
	value = gen.value_to_code(node, 'VALUE', Order.NONE) or '()'
	return 'let! %s = %s\n'%(name, value)

def _keyword_statement(keyword:str):
	def emit(gen:Generation, node:Node):
		value = gen.value_to_code(node, 'VALUE', Order.NONE) or '()'
		return '%s %s\n'%(keyword, value)
	return emit

emitter('comp_return')(_keyword_statement('return'))
emitter('comp_return_bang')(_keyword_statement('return!'))
emitter('comp_do')(_keyword_statement('do!'))
