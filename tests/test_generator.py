import unittest

from blocksharp.graph import Workspace
from blocksharp.diagnostics import Report
from blocksharp.generator import generate, Generation, Options, Order, needs_parentheses, NoEmitter, quote
from blocksharp.type_model import INT, FLOAT, STRING, UNIT, NULL, Tuple, Poly, Function, Datatype
from blocksharp import procedures, datatypes, workflows
from blocksharp.emit import catalog  # Fills the table of emitters.

NOT_IMPLEMENTED = 'failwith "function not implemented"'

def block(ws, kind, fields=(), **children):
	node = ws.new_node(kind, **dict(fields))
	for slot, child in children.items():
		node.add_input(slot)
		if child is not None:
			node.connect(slot, child)
	return node

def num(ws, n): return block(ws, 'math_number', {'NUM':str(n)})
def var(ws, name): return block(ws, 'variables_get', {'VAR':name})
def assign(ws, name, value): return block(ws, 'variables_set', {'VAR':name}, VALUE=value)
def arith(ws, op, a, b): return block(ws, 'math_arithmetic', {'OP':op}, A=a, B=b)
def logic(ws, op, a, b): return block(ws, 'logic_operation', {'OP':op}, A=a, B=b)

def expr(ws, node):
	code, order = Generation(ws).block_to_code(node)
	return code

class ParenthesesTests(unittest.TestCase):

	def test_rule(self):
		self.assertTrue(needs_parentheses(Order.MULTIPLICATIVE, Order.ADDITIVE))
		self.assertFalse(needs_parentheses(Order.ADDITIVE, Order.MULTIPLICATIVE))
		self.assertTrue(needs_parentheses(Order.ADDITIVE, Order.ADDITIVE))
		self.assertFalse(needs_parentheses(Order.ATOMIC, Order.ATOMIC))
		self.assertFalse(needs_parentheses(Order.NONE, Order.NONE))
		self.assertFalse(needs_parentheses(Order.NONE, Order.FUNCTION_MATCH_TRY))
		self.assertFalse(needs_parentheses(Order.AND, Order.AND))
		self.assertFalse(needs_parentheses(Order.FUNCTION_APPLICATION, Order.MEMBER))
		self.assertTrue(needs_parentheses(Order.ATOMIC, Order.FUNCTION_APPLICATION))

	def test_arithmetic(self):
		ws = Workspace()
		for node, expect in [
			(arith(ws, 'MULTIPLY', arith(ws, 'ADD', num(ws, 1), num(ws, 2)), num(ws, 3)), '(1 + 2) * 3'),
			(arith(ws, 'ADD', num(ws, 1), arith(ws, 'MULTIPLY', num(ws, 2), num(ws, 3))), '1 + 2 * 3'),
			(arith(ws, 'MINUS', num(ws, 1), arith(ws, 'MINUS', num(ws, 2), num(ws, 3))), '1 - (2 - 3)'),
			(arith(ws, 'ADD', num(ws, -1), num(ws, 2)), '-1 + 2'),
			(block(ws, 'math_modulo', DIVIDEND=num(ws, 7), DIVISOR=arith(ws, 'DIVIDE', num(ws, 4), num(ws, 2))), '7 % (4 / 2)'),
		]:
			with self.subTest(expect):
				self.assertEqual(expect, expr(ws, node))

	def test_logic(self):
		ws = Workspace()
		a, b, c = (var(ws, name) for name in 'abc')
		self.assertEqual('a && b && c', expr(ws, logic(ws, 'AND', logic(ws, 'AND', a, b), c)))
		a, b, c = (var(ws, name) for name in 'abc')
		self.assertEqual('(a || b) && c', expr(ws, logic(ws, 'AND', logic(ws, 'OR', a, b), c)))
		a, b = (var(ws, name) for name in 'ab')
		self.assertEqual('not (a && b)', expr(ws, block(ws, 'logic_negate', BOOL=logic(ws, 'AND', a, b))))
		self.assertEqual('not x', expr(ws, block(ws, 'logic_negate', BOOL=var(ws, 'x'))))
		half = logic(ws, 'AND', block(ws, 'logic_boolean', {'BOOL':'TRUE'}), None)
		self.assertEqual('true && true', expr(ws, half))
		self.assertEqual('false || false', expr(ws, logic(ws, 'OR', None, None)))

	def test_comparison_and_conditional(self):
		ws = Workspace()
		compare = block(ws, 'logic_compare', {'OP':'LTE'}, A=var(ws, 'x'), B=arith(ws, 'ADD', num(ws, 1), num(ws, 2)))
		self.assertEqual('x <= 1 + 2', expr(ws, compare))
		ternary = block(ws, 'logic_ternary', IF=compare, THEN=num(ws, 1), ELSE=num(ws, 0))
		self.assertEqual('if x <= 1 + 2 then 1 else 0', expr(ws, ternary))

	def test_application(self):
		ws = Workspace()
		f = procedures.new_procedure(ws, 'f', [('x', INT)], INT)
		g = procedures.new_procedure(ws, 'g', [('x', INT)], INT)
		outer = procedures.new_call(ws, f)
		inner = procedures.new_call(ws, g)
		inner.connect('ARG0', num(ws, 1))
		outer.connect('ARG0', inner)
		self.assertEqual('f (g 1)', expr(ws, outer))
		other = procedures.new_call(ws, f)
		other.connect('ARG0', num(ws, -1))
		self.assertEqual('f (-1)', expr(ws, other))
		summed = procedures.new_call(ws, f)
		summed.connect('ARG0', arith(ws, 'ADD', num(ws, 1), num(ws, 2)))
		self.assertEqual('f (1 + 2)', expr(ws, summed))


class DatatypeEmissionTests(unittest.TestCase):

	def setUp(self) -> None:
		self.ws = Workspace()

	def test_shape(self):
		shape = datatypes.new_definition(self.ws, 'Shape')
		datatypes.add_case(shape, 'Circle', [FLOAT])
		datatypes.add_case(shape, 'Square', [FLOAT])
		datatypes.add_case(shape, 'Rectangle', [FLOAT, FLOAT])
		self.assertEqual(
			"type Shape =\n"
			"| Circle of float\n"
			"| Square of float\n"
			"| Rectangle of float * float\n",
			generate(self.ws),
		)

	def test_generic(self):
		pair = datatypes.new_definition(self.ws, 'Pair', 2)
		datatypes.add_case(pair, 'MkPair', [Poly('a'), Poly('b')])
		self.assertEqual("type Pair<'a, 'b> =\n| MkPair of 'a * 'b\n", generate(self.ws))

	def test_unbound_parameters_skip_letters_already_named(self):
		for named_slot, expect in [
			('PARAM0', "type Pair<'a, 'b> =\n| Mk\n"),
			('PARAM1', "type Pair<'b, 'a> =\n| Mk\n"),
		]:
			with self.subTest(named_slot):
				ws = Workspace()
				pair = datatypes.new_definition(ws, 'Pair', 2)
				pair.connect(named_slot, block(ws, 'type_poly', {'NAME':'a'}))
				datatypes.add_case(pair, 'Mk')
				self.assertEqual(expect, generate(ws))

	def test_nullary_cases_and_grouped_fields(self):
		tree = datatypes.new_definition(self.ws, 'Tree')
		datatypes.add_case(tree, 'Leaf')
		datatypes.add_case(tree, 'Node', [Tuple([INT, INT]), Datatype('Tree')])
		self.assertEqual("type Tree =\n| Leaf\n| Node of (int * int) * Tree<>\n", generate(self.ws))

	def test_builders(self):
		shape = datatypes.new_definition(self.ws, 'Shape')
		rectangle = datatypes.add_case(shape, 'Rectangle', [FLOAT, FLOAT])
		dot = datatypes.add_case(shape, 'Dot')
		builder = datatypes.new_builder(self.ws, rectangle)
		builder.connect('ARG0', num(self.ws, 1.0))
		builder.connect('ARG1', arith(self.ws, 'ADD', num(self.ws, 1.0), num(self.ws, 2.0)))
		self.assertEqual('Rectangle(1.0, 1.0 + 2.0)', expr(self.ws, builder))
		self.assertEqual('Dot', expr(self.ws, datatypes.new_builder(self.ws, dot)))

	def test_comment_on_definition(self):
		color = datatypes.new_definition(self.ws, 'Color')
		color.comment = "Primary, mostly."
		datatypes.add_case(color, 'Red')
		self.assertEqual("// Primary, mostly.\ntype Color =\n| Red\n", generate(self.ws))


class ProcedureEmissionTests(unittest.TestCase):

	def setUp(self) -> None:
		self.ws = Workspace()

	def test_simple_function(self):
		add = procedures.new_procedure(self.ws, 'add', [('x', INT), ('y', INT)], INT)
		add.connect('RETURN', arith(self.ws, 'ADD', var(self.ws, 'x'), var(self.ws, 'y')))
		self.assertEqual("let add (x: int) (y: int) =\n    x + y\n", generate(self.ws))

	def test_recursive_without_body(self):
		procedures.new_procedure(self.ws, 'loop', [('n', INT)], INT, is_recursive=True)
		self.assertEqual("let rec loop (n: int) =\n    %s\n"%NOT_IMPLEMENTED, generate(self.ws))

	def test_statement_body(self):
		greet = procedures.new_procedure(self.ws, 'greet', [('name', STRING)], UNIT, has_body=True)
		greet.connect('STACK', block(self.ws, 'text_print', TEXT=var(self.ws, 'name')))
		greet.connect('RETURN', block(self.ws, 'logic_unit'))
		self.assertEqual(['STACK', 'RETURN'], list(greet.inputs))
		self.assertEqual('let greet (name: string) =\n    printfn "%A" name\n    ()\n', generate(self.ws))

	def test_no_parameters(self):
		answer = procedures.new_procedure(self.ws, 'answer', [], INT)
		answer.connect('RETURN', num(self.ws, 42))
		assign(self.ws, 'x', procedures.new_call(self.ws, answer))
		self.assertEqual("let answer () =\n    42\n\nlet x = answer ()\n", generate(self.ws))

	def test_lambda_as_argument(self):
		apply = procedures.new_procedure(self.ws, 'apply', [('f', Function([INT], INT))], INT)
		call = procedures.new_call(self.ws, apply)
		lam = procedures.new_anonymous(self.ws, [('x', INT)], INT)
		lam.connect('RETURN', var(self.ws, 'x'))
		call.connect('ARG0', lam)
		assign(self.ws, 'r', call)
		self.assertEqual(
			"let apply (f: int -> int) =\n    %s\n\nlet r = apply (fun (x: int) -> x)\n"%NOT_IMPLEMENTED,
			generate(self.ws),
		)

	def test_lambda_standing_alone(self):
		lam = procedures.new_anonymous(self.ws, [('x', INT)], INT)
		lam.connect('RETURN', var(self.ws, 'x'))
		self.assertEqual("fun (x: int) -> x\n", generate(self.ws))

	def test_calling_a_function_parameter(self):
		twice = procedures.new_procedure(self.ws, 'twice', [('f', Function([INT], INT)), ('x', INT)], INT)
		outer = procedures.new_function_call(self.ws, 'f', Function([INT], INT))
		inner = procedures.new_function_call(self.ws, 'f', Function([INT], INT))
		inner.connect('ARG0', var(self.ws, 'x'))
		outer.connect('ARG0', inner)
		twice.connect('RETURN', outer)
		self.assertEqual("let twice (f: int -> int) (x: int) =\n    f (f x)\n", generate(self.ws))

	def test_partial_application(self):
		f = procedures.new_procedure(self.ws, 'f', [('x', INT), ('y', INT)], INT)
		f.connect('RETURN', arith(self.ws, 'ADD', var(self.ws, 'x'), var(self.ws, 'y')))
		partial = procedures.new_call(self.ws, f, arg_count=1)
		partial.connect('ARG0', num(self.ws, 1))
		assign(self.ws, 'g', partial)
		rest = procedures.new_call(self.ws, partial)
		rest.connect('ARG0', num(self.ws, 2))
		assign(self.ws, 'r', rest)
		self.assertEqual(
			"let f (x: int) (y: int) =\n    x + y\n\nlet g = f 1\n\nlet r = g 2\n",
			generate(self.ws),
		)

	def test_conditional_return(self):
		pick = block(
			self.ws, 'procedures_ifelsereturn',
			CONDITION=block(self.ws, 'logic_boolean', {'BOOL':'TRUE'}),
			VALUE1=num(self.ws, 1), VALUE2=num(self.ws, 2),
		)
		self.assertEqual('if true then 1 else 2', expr(self.ws, pick))

	def test_unresolved_call(self):
		report = Report()
		ghost = self.ws.new_node('procedures_callreturn', NAME='ghost')
		self.assertEqual("ghost ()\n", generate(self.ws, report=report))
		self.assertEqual([ghost.id], [issue.node_id for issue in report.issues])

	def test_untyped_parameter(self):
		report = Report()
		procedures.new_procedure(self.ws, 'idle', [('x', NULL)])
		self.assertEqual("let idle (x: unit) =\n    %s\n"%NOT_IMPLEMENTED, generate(self.ws, report=report))
		self.assertTrue(report.sick())


class WorkflowEmissionTests(unittest.TestCase):

	def test_maybe(self):
		ws = Workspace()
		builder = workflows.new_builder(ws, 'maybe')
		builder.child('RETURN').connect('RETURN', block(ws, 'option_some', VALUE=var(ws, 'x')))
		workflow = workflows.new_workflow(ws, builder)
		bind = block(ws, 'comp_let', {'VAR':'v'}, VALUE=block(ws, 'option_some', VALUE=num(ws, 1)))
		bind.set_next(block(ws, 'comp_return', VALUE=var(ws, 'v')))
		workflow.connect('BODY', bind)
		assign(ws, 'result', workflow)
		self.assertEqual(
			"type MaybeBuilder() =\n"
			"    member this.Bind(m, f) =\n"
			"        failwith \"function not implemented\"\n"
			"    member this.Return(x) =\n"
			"        Some x\n"
			"\n"
			"let maybe = new MaybeBuilder()\n"
			"\n"
			"let result = maybe {\n"
			"    let! v = Some 1\n"
			"    return v\n"
			"}\n",
			generate(ws),
		)

	def test_workflow_in_a_procedure_body(self):
		ws = Workspace()
		builder = workflows.new_builder(ws, 'maybe')
		workflow = workflows.new_workflow(ws, builder)
		workflow.connect('BODY', block(ws, 'comp_return', VALUE=num(ws, 1)))
		run = procedures.new_procedure(ws, 'run', [], UNIT, has_body=True)
		run.connect('STACK', workflow)
		run.connect('RETURN', block(ws, 'logic_unit'))
		self.assertIn("let run () =\n    maybe {\n        return 1\n    }\n    ()\n", generate(ws))

	def test_workflow_followed_by_a_statement(self):
		ws = Workspace()
		builder = workflows.new_builder(ws, 'maybe')
		workflow = workflows.new_workflow(ws, builder)
		workflow.connect('BODY', block(ws, 'comp_return', VALUE=num(ws, 1)))
		workflow.set_next(assign(ws, 'x', num(ws, 1)))
		self.assertTrue(generate(ws).endswith("\n\nmaybe {\n    return 1\n}\nlet x = 1\n"))

	def test_other_statements(self):
		ws = Workspace()
		first = block(ws, 'comp_do', VALUE=var(ws, 'job'))
		first.set_next(block(ws, 'comp_return_bang', VALUE=var(ws, 'rest')))
		self.assertEqual("do! job\nreturn! rest\n", Generation(ws).block_to_code(first))

	def test_unresolved_workflow(self):
		ws = Workspace()
		report = Report()
		lost = block(ws, 'comp_workflow', {'NAME':'async'})
		self.assertEqual("async {\n}\n", generate(ws, report=report))
		self.assertEqual([lost.id], [issue.node_id for issue in report.issues])


class OtherEmissionTests(unittest.TestCase):

	def setUp(self) -> None:
		self.ws = Workspace()

	def test_match(self):
		first = block(self.ws, 'matchcase', PATTERN=num(self.ws, 0), THEN=block(self.ws, 'text', {'TEXT':'zero'}))
		first.set_next(block(self.ws, 'matchcase', PATTERN=block(self.ws, 'matchcase_wildcard'), THEN=block(self.ws, 'text', {'TEXT':'many'})))
		match = block(self.ws, 'match', VARIABLE=var(self.ws, 's'))
		match.add_input('CASES', statement=True)
		match.connect('CASES', first)
		assign(self.ws, 'label', match)
		self.assertEqual('let label = match s with\n| 0 -> "zero"\n| _ -> "many"\n', generate(self.ws))

	def test_lists(self):
		ws = self.ws
		items = block(ws, 'lists_create_with', ADD0=num(ws, 1), ADD1=num(ws, 2), ADD2=None)
		self.assertEqual('[1; 2]', expr(ws, items))
		cons = block(ws, 'lists_cons', FIRST=num(ws, 0), REST=items)
		self.assertEqual('0 :: [1; 2]', expr(ws, cons))
		self.assertEqual('List.length (0 :: [1; 2])', expr(ws, block(ws, 'lists_length', VALUE=cons)))
		self.assertEqual('[] @ [3]', expr(ws, block(ws, 'lists_append', A=None, B=block(ws, 'lists_create_with', ADD0=num(ws, 3)))))
		self.assertEqual('None', expr(ws, block(ws, 'option_none')))

	def test_text(self):
		ws = self.ws
		joined = block(ws, 'text_join', ADD0=block(ws, 'text', {'TEXT':'n = '}), ADD1=var(ws, 'n'))
		self.assertEqual('String.concat "" ["n = "; string n]', expr(ws, joined))
		self.assertEqual('"say \\"hi\\""', quote('say "hi"'))
		self.assertEqual('String.length "abc"', expr(ws, block(ws, 'text_length', VALUE=block(ws, 'text', {'TEXT':'abc'}))))

	def test_types_as_values(self):
		ws = self.ws
		self.assertEqual('int * string', expr(ws, block(ws, 'type_tuple', FST=block(ws, 'type_int'), SND=block(ws, 'type_string'))))
		self.assertEqual("list<'a>", expr(ws, block(ws, 'type_list', TYPE=block(ws, 'type_poly', {'NAME':'a'}))))

	def test_math_brings_in_system(self):
		block(self.ws, 'math_single', {'OP':'ROOT'}, NUM=num(self.ws, 2))
		self.assertEqual("open System\n\nMath.Sqrt 2\n", generate(self.ws))

	def test_negation_needs_no_import(self):
		block(self.ws, 'math_single', {'OP':'NEG'}, NUM=var(self.ws, 'x'))
		self.assertEqual("-x\n", generate(self.ws))


class LayoutTests(unittest.TestCase):

	def setUp(self) -> None:
		self.ws = Workspace()

	def test_comments(self):
		one = num(self.ws, 1)
		one.comment = "one"
		setter = assign(self.ws, 'x', one)
		setter.comment = "hello"
		self.assertEqual("// hello\n// one\nlet x = 1\n", generate(self.ws))

	def test_statement_comment_inside_a_lambda_appears_once(self):
		lam = procedures.new_anonymous(self.ws, [('x', INT)], INT, has_body=True)
		say = block(self.ws, 'text_print', TEXT=var(self.ws, 'x'))
		say.comment = "say it"
		lam.connect('STACK', say)
		lam.connect('RETURN', var(self.ws, 'x'))
		assign(self.ws, 'f', lam)
		self.assertEqual(
			'let f = fun (x: int) ->\n    // say it\n    printfn "%A" x\n    x\n',
			generate(self.ws),
		)

	def test_comments_wrap(self):
		setter = assign(self.ws, 'x', num(self.ws, 1))
		setter.comment = "word " * 20
		options = Options(comment_wrap=30)
		lines = generate(self.ws, options).splitlines()
		self.assertTrue(all(line.startswith('// ') for line in lines[:-1]))
		self.assertTrue(all(len(line) <= 30 for line in lines[:-1]))
		self.assertEqual('let x = 1', lines[-1])

	def test_chaining_and_this_only(self):
		first = assign(self.ws, 'x', num(self.ws, 1))
		second = assign(self.ws, 'y', num(self.ws, 2))
		first.set_next(second)
		self.assertEqual("let x = 1\nlet y = 2\n", generate(self.ws))
		self.assertEqual("let x = 1\n", Generation(self.ws).block_to_code(first, this_only=True))

	def test_disabled_blocks_are_skipped(self):
		first = assign(self.ws, 'x', num(self.ws, 1))
		second = assign(self.ws, 'y', num(self.ws, 2))
		third = assign(self.ws, 'z', num(self.ws, 3))
		first.set_next(second)
		second.set_next(third)
		second.disabled = True
		hidden = datatypes.new_definition(self.ws, 'Hidden')
		datatypes.add_case(hidden, 'Nope')
		hidden.disabled = True
		self.assertEqual("let x = 1\nlet z = 3\n", generate(self.ws))

	def test_hoisting_order(self):
		assign(self.ws, 'x', block(self.ws, 'math_single', {'OP':'ROOT'}, NUM=num(self.ws, 2)))
		color = datatypes.new_definition(self.ws, 'Color')
		datatypes.add_case(color, 'Red')
		datatypes.add_case(color, 'Green')
		answer = procedures.new_procedure(self.ws, 'answer', [], INT)
		answer.connect('RETURN', num(self.ws, 42))
		self.assertEqual(
			"open System\n\n"
			"type Color =\n| Red\n| Green\n\n"
			"let answer () =\n    42\n\n"
			"let x = Math.Sqrt 2\n",
			generate(self.ws),
		)

	def test_reserved_names_and_fresh_runs(self):
		assign(self.ws, 'let', num(self.ws, 1))
		assign(self.ws, '2nd place', var(self.ws, 'let'))
		expect = "let let2 = 1\n\nlet my_2nd_place = let2\n"
		self.assertEqual(expect, generate(self.ws))
		self.assertEqual(expect, generate(self.ws))

	def test_empty_workspace(self):
		self.assertEqual("", generate(self.ws))

	def test_unknown_kind(self):
		self.ws.new_node('mystery_block')
		with self.assertRaises(NoEmitter):
			generate(self.ws)

	def test_every_type_kind_has_an_emitter(self):
		from blocksharp.type_model import TYPE_KINDS
		self.assertLessEqual(TYPE_KINDS, catalog.KINDS)


if __name__ == '__main__':
	unittest.main()
