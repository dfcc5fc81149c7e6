"""
Procedures: named `let` functions, anonymous lambdas, and the calls between them.

A definition keeps its signature in node state, exactly as the mutator dialog left it:
an ordered list of Parameters (display name, declared type, stable id), an optional return
type, the recursion flag, and whether it has a statement body. Calls keep a copy of all that,
plus how many arguments they actually supply. Supplying fewer is partial application,
and a partially-applied call is itself something that can be called: it defines the
procedure of the remaining arguments. So does a call whose result is a function.

Names of anonymous procedures deserve a word. A lambda plugged straight into an assignment
takes the assigned variable's name; calls through that variable are `args_callreturn` blocks.
Any other lambda goes by its node id, which nothing will ever match by accident.
"""
import xml.etree.ElementTree as ET
from typing import NamedTuple, Optional, Iterable, Union
from .graph import Node, Workspace, ChangeEvent
from .names import Category
from .registry import Registry, template
from .mutation import reshape_arguments, bool_attribute, bool_text
from . import type_model
from .type_model import FSType, Function, MalformedPersistedForm

ALL = 'ALL'
CALL_KINDS = ('procedures_callreturn', 'args_callreturn')

class Parameter(NamedTuple):
	display_name: str
	type: FSType
	param_id: str

class ProcedureDef(NamedTuple):
	name: str
	parameters: tuple[Parameter, ...]
	return_type: Optional[FSType]
	is_recursive: bool
	has_body: bool

def assigned_name(node:Node) -> Optional[str]:
	""" The variable an expression is directly assigned to, if any. """
	parent = node.parent
	if parent is not None and parent.kind == 'variables_set' and parent.child('VALUE') is node:
		return parent.field('VAR')

def visible_count(call:Node) -> int:
	""" How many arguments a call actually supplies. """
	parameters = call.state.get('parameters', ())
	count = call.state.get('arg_count', ALL)
	return len(parameters) if count == ALL else min(int(count), len(parameters))

class ProcedureRegistry(Registry):
	category = Category.PROCEDURE
	definition_kinds = {
		'procedures_defreturn':'describe_named',
		'procedures_anonymous':'describe_anonymous',
		'procedures_callreturn':'describe_call_result',
		'args_callreturn':'describe_call_result',
	}
	usage_kinds = {'procedures_callreturn':'NAME', 'args_callreturn':'NAME'}

	def _signature(self, node:Node, name:str) -> ProcedureDef:
		return ProcedureDef(
			name,
			tuple(node.state.get('parameters', ())),
			node.state.get('return_type'),
			bool(node.state.get('is_recursive', False)),
			bool(node.state.get('has_body', False)),
		)

	def describe_named(self, node:Node) -> ProcedureDef:
		return self._signature(node, node.field('NAME') or '')

	def describe_anonymous(self, node:Node) -> ProcedureDef:
		return self._signature(node, assigned_name(node) or node.id)

	def describe_call_result(self, node:Node) -> Optional[ProcedureDef]:
		parameters = tuple(node.state.get('parameters', ()))
		count = visible_count(node)
		result = node.state.get('return_type')
		name = assigned_name(node) or node.id
		if count < len(parameters):
			return ProcedureDef(name, parameters[count:], result, False, False)
		if isinstance(result, Function):
			synthetic = tuple(
				Parameter('a%d'%i, t, '%s.a%d'%(node.id, i))
				for i, t in enumerate(result.inputs)
			)
			return ProcedureDef(name, synthetic, result.output, False, False)

	def set_name(self, node:Node, name:str):
		if node.kind == 'procedures_defreturn':
			node.set_field('NAME', name)
		else:
			parent = node.parent
			parent.set_field('VAR', name)

	def rename(self, node:Node, proposed:str) -> str:
		if node.kind != 'procedures_defreturn' and assigned_name(node) is None:
			# Nothing to rename; the id is the name.
			return node.id
		return super().rename(node, proposed)

	# Descriptors

	def descriptor(self, node:Node) -> ET.Element:
		proc = self.describe(node)
		element = ET.Element('mutation', name=proc.name)
		element.set('isRec', bool_text(proc.is_recursive))
		if not proc.has_body:
			element.set('statements', 'false')
		_write_signature(element, proc.parameters, proc.return_type)
		return element

	def usage_descriptor(self, usage:Node) -> ET.Element:
		count = usage.state.get('arg_count', ALL)
		element = ET.Element('mutation', name=usage.field('NAME') or '', argCount=str(count))
		if usage.kind == 'args_callreturn' and usage.state.get('display_name'):
			element.set('displayName', usage.state['display_name'])
		_write_signature(element, usage.state.get('parameters', ()), usage.state.get('return_type'))
		return element

	def apply(self, usage:Node, descriptor:ET.Element) -> list[Node]:
		proc = read_descriptor(descriptor)
		if usage.kind == 'procedures_callreturn':
			usage.set_field('NAME', proc.name)
		usage.state['parameters'] = list(proc.parameters)
		usage.state['return_type'] = proc.return_type
		count = usage.state.get('arg_count', ALL)
		if count != ALL and int(count) >= len(proc.parameters):
			usage.state['arg_count'] = ALL
		visible = proc.parameters[:visible_count(usage)]
		return reshape_arguments(usage, [p.param_id for p in visible])

	def propagate_layers(self, node:Node, report=None) -> list[ChangeEvent]:
		"""
		Propagate a definition, then give each changed usage that is itself a definition
		(a partial application, say) its own separate pass.
		"""
		events = self.propagate(node, report)
		for event in list(events):
			usage = node.workspace.node_by_id(event.node_id)
			if usage is not None and self.describe(usage) is not None:
				events.extend(self.propagate_layers(usage, report))
		return events

	# Toolbox

	def toolbox(self, workspace:Workspace) -> list[ET.Element]:
		found = [
			template('procedures_defreturn'),
			template('procedures_anonymous'),
			template('procedures_ifelsereturn'),
		]
		for node, proc in sorted(self.definitions(workspace), key=lambda pair:pair[1].name.casefold()):
			if node.kind == 'procedures_defreturn':
				call = ET.Element('mutation', name=proc.name, argCount=ALL)
				_write_signature(call, proc.parameters, proc.return_type)
				found.append(template('procedures_callreturn', call))
				for p in proc.parameters:
					if isinstance(p.type, Function):
						found.append(template('args_callreturn', _function_call(p.display_name, p.type, p.param_id)))
			elif assigned_name(node) is not None:
				call = ET.Element('mutation', name=proc.name, argCount=ALL)
				_write_signature(call, proc.parameters, proc.return_type)
				found.append(template('args_callreturn', call))
		return found

def _write_signature(element:ET.Element, parameters:Iterable[Parameter], return_type:Optional[FSType]):
	for p in parameters:
		arg = ET.SubElement(element, 'arg', name=p.display_name, paramId=p.param_id)
		arg.append(type_model.to_xml(p.type))
	if return_type is not None:
		element.append(type_model.to_xml(return_type, 'returntype'))

def _function_call(name:str, signature:Function, param_id:str) -> ET.Element:
	call = ET.Element('mutation', name=name, argCount=ALL, displayName=name)
	synthetic = [Parameter('a%d'%i, t, '%s.a%d'%(param_id, i)) for i, t in enumerate(signature.inputs)]
	_write_signature(call, synthetic, signature.output)
	return call

def read_descriptor(element:ET.Element) -> ProcedureDef:
	"""
	The inverse of ProcedureRegistry.descriptor. Descriptors written before parameters had ids
	use the parameter's name as its id; those written before the recursion flag mean not recursive.
	"""
	parameters = []
	for arg in element.findall('arg'):
		name = arg.get('name')
		if name is None:
			raise MalformedPersistedForm("<arg> lacks the 'name' attribute.")
		declared = arg.find('type')
		t = type_model.NULL if declared is None else type_model.from_xml(declared)
		parameters.append(Parameter(name, t, arg.get('paramId') or name))
	return ProcedureDef(
		element.get('name') or '',
		tuple(parameters),
		type_model.optional_from_xml(element, 'returntype'),
		bool_attribute(element, 'isRec', False),
		bool_attribute(element, 'statements', True),
	)

PROCEDURES = ProcedureRegistry()

###############################################################################
# Shape edits and instantiation.

Signature = Iterable[Union[Parameter, tuple[str, FSType]]]

def _parameters(workspace:Workspace, parameters:Signature) -> list[Parameter]:
	found = []
	for p in parameters:
		if not isinstance(p, Parameter):
			name, t = p
			p = Parameter(name, t, workspace.new_id('param'))
		found.append(p)
	return found

def _set_body(node:Node, has_body:bool):
	node.state['has_body'] = has_body
	if has_body and 'STACK' not in node.inputs:
		node.add_input('STACK', statement=True)
		node.inputs['RETURN'] = node.inputs.pop('RETURN')
	elif not has_body and 'STACK' in node.inputs:
		node.remove_input('STACK')

def _new_procedure(workspace:Workspace, kind:str, parameters:Signature, return_type, is_recursive, has_body, **fields) -> Node:
	node = workspace.new_node(kind, **fields)
	node.state['parameters'] = _parameters(workspace, parameters)
	node.state['return_type'] = return_type
	node.state['is_recursive'] = is_recursive
	node.add_input('RETURN')
	_set_body(node, has_body)
	return node

def new_procedure(workspace:Workspace, name:str, parameters:Signature=(), return_type:Optional[FSType]=None, *, is_recursive=False, has_body=False) -> Node:
	node = _new_procedure(workspace, 'procedures_defreturn', parameters, return_type, is_recursive, has_body)
	node.fields['NAME'] = PROCEDURES.reserve(name, workspace, node)
	return node

def new_anonymous(workspace:Workspace, parameters:Signature=(), return_type:Optional[FSType]=None, *, has_body=False) -> Node:
	return _new_procedure(workspace, 'procedures_anonymous', parameters, return_type, False, has_body)

def compose(node:Node, parameters:Optional[Signature]=None, return_type=..., *, is_recursive:Optional[bool]=None, has_body:Optional[bool]=None, report=None) -> list[ChangeEvent]:
	"""
	What the mutator dialog does when it closes: set the new signature, then bring every
	call into line. Parameters that keep their Parameter (and so their id) keep their arguments.
	"""
	workspace = node.workspace
	if parameters is not None:
		node.state['parameters'] = _parameters(workspace, parameters)
	if return_type is not ...:
		node.state['return_type'] = return_type
	if is_recursive is not None:
		node.state['is_recursive'] = is_recursive
	if has_body is not None:
		_set_body(node, has_body)
	return PROCEDURES.propagate_layers(node, report)

def new_call(workspace:Workspace, definition:Node, arg_count=ALL) -> Node:
	proc = PROCEDURES.describe(definition)
	kind = 'procedures_callreturn' if definition.kind == 'procedures_defreturn' else 'args_callreturn'
	call = workspace.new_node(kind, NAME=proc.name)
	call.state['arg_count'] = arg_count
	PROCEDURES.apply(call, PROCEDURES.descriptor(definition))
	return call

def new_function_call(workspace:Workspace, name:str, signature:Function) -> Node:
	""" Call a function-typed parameter or variable. Nothing defines it, so nothing propagates to it. """
	call = workspace.new_node('args_callreturn', NAME=name)
	call.state['display_name'] = name
	call.state['arg_count'] = ALL
	PROCEDURES.apply(call, _function_call(name, signature, workspace.new_id('param')))
	return call
