"""
Procedures come out as `let` functions (hoisted), lambdas, and applications.

Every parameter is annotated with its declared type. A parameter nobody gave a type
gets `unit`: it still compiles, and the name makes the gap obvious to whoever reads it.
A procedure with no parameters takes `()`, and calls to it pass `()`.
"""
from typing import Iterable
from ..generator import emitter, Order, Generation, PROCEDURE_KEY
from ..graph import Node
from ..names import Category
from ..procedures import PROCEDURES, CALL_KINDS, ProcedureDef, Parameter, visible_count
from ..registry import UnresolvedReference
from ..type_model import NullType, render_target

NOT_IMPLEMENTED = 'failwith "function not implemented"'

def parameter_list(gen:Generation, node:Node, parameters:Iterable[Parameter]) -> str:
	text = ''
	for p in parameters:
		if isinstance(p.type, NullType):
			gen.report.untyped_parameter(node.id, p.display_name)
		text += ' (%s: %s)'%(gen.name(p.display_name, Category.VARIABLE), render_target(p.type))
	return text or ' ()'

def procedure_body(gen:Generation, node:Node, proc:ProcedureDef, indent:str) -> str:
	"""
	The statement stack, then the returned expression, each line indented.
	With neither, a body that fails loudly when called.
	"""
	branch = gen.statement_to_code(node, 'STACK', indent) if proc.has_body and 'STACK' in node.inputs else ''
	result = gen.value_to_code(node, 'RETURN', Order.NONE)
	if not (branch or result):
		return indent + NOT_IMPLEMENTED + '\n'
	if result:
		branch += indent + result + '\n'
	return branch

@emitter('procedures_defreturn')
def procedures_defreturn(gen:Generation, node:Node):
	proc = PROCEDURES.describe_named(node)
	name = gen.name(proc.name, Category.PROCEDURE)
	head = 'let ' + ('rec ' if proc.is_recursive else '') + name + parameter_list(gen, node, proc.parameters) + ' ='
	code = head + '\n' + procedure_body(gen, node, proc, gen.indent)
	gen.define(PROCEDURE_KEY+name, gen.scrub(node, code, this_only=True))
	return None

@emitter('procedures_anonymous')
def procedures_anonymous(gen:Generation, node:Node):
	proc = PROCEDURES.describe_anonymous(node)
	head = 'fun' + parameter_list(gen, node, proc.parameters) + ' ->'
	body = procedure_body(gen, node, proc, gen.indent)
	if '\n' in body.rstrip('\n'):
		code = head + '\n' + body.rstrip('\n')
	else:
		code = head + ' ' + body.strip()
	parent = node.parent
	if parent is not None and parent.kind in CALL_KINDS and parent.next is not node:
		return '(' + code + ')', Order.ATOMIC
	return code, Order.FUNCTION_MATCH_TRY

@emitter(*CALL_KINDS)
def procedures_callreturn(gen:Generation, node:Node):
	written = node.field('NAME') or ''
	if node.kind == 'procedures_callreturn':
		name = gen.name(written, Category.PROCEDURE)
	else:
		name = gen.name(node.state.get('display_name') or written, Category.VARIABLE)
	if node.kind == 'procedures_callreturn':
		try: PROCEDURES.definition_of(written, gen.workspace)
		except UnresolvedReference:
			gen.report.unresolved_reference(node.id, 'procedure', written)
	parameters = node.state.get('parameters')
	if not parameters:
		return name + ' ()', Order.FUNCTION_APPLICATION
	count = visible_count(node)
	if not count:
		return name, Order.ATOMIC
	args = [
		gen.value_to_code(node, 'ARG%d'%i, Order.ATOMIC) or placeholder(p)
		for i, p in enumerate(parameters[:count])
	]
	return ' '.join([name] + args), Order.FUNCTION_APPLICATION

def placeholder(p:Parameter) -> str:
	""" Stands in for an argument nobody has plugged in yet. Type-correct, and obviously unfinished. """
	return 'Unchecked.defaultof<%s>'%render_target(p.type)

@emitter('procedures_ifelsereturn')
def procedures_ifelsereturn(gen:Generation, node:Node):
	condition = gen.value_to_code(node, 'CONDITION', Order.NONE) or 'false'
	value1 = gen.value_to_code(node, 'VALUE1', Order.NONE) or '()'
	value2 = gen.value_to_code(node, 'VALUE2', Order.NONE) or '()'
	return 'if %s then %s else %s'%(condition, value1, value2), Order.IF
