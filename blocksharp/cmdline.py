"""
Renders persisted F# types from the block editor's descriptors.

{0}

For example:

    blocksharp types.xml

reads every type element under the document root and prints its display form
beside the F# it will turn into, or else explains what's wrong with it.

    blocksharp -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

parser = argparse.ArgumentParser(
	prog="blocksharp",
	description="Render persisted block-editor types as F#.",
)
parser.add_argument("document", help="an XML file whose root holds <type> elements.")
parser.add_argument('-t', "--target", action="store_true", help="Print only the F# rendering of each type.")
parser.add_argument('-v', "--verbose", action="count", help="Mention what is going on along the way.")

def run(args):
	import xml.etree.ElementTree as ET
	from .diagnostics import Report
	from .type_model import from_xml, render, render_target, MalformedPersistedForm
	report = Report(verbose=args.verbose)
	path = Path.cwd() / args.document
	try:
		root = ET.parse(path).getroot()
	except (OSError, ET.ParseError) as ex:
		print("Could not read %s: %s"%(path, ex), file=sys.stderr)
		return 1
	report.info("Read %d element(s) from %s"%(len(root), path))
	for element in root:
		try:
			t = from_xml(element)
		except MalformedPersistedForm as ex:
			report.issue(element.get('name'), str(ex))
			continue
		if args.target:
			print(render_target(t))
		else:
			print("%s\t%s"%(render(t), render_target(t)))
	if report.sick():
		report.complain_to_console()
		return 1

def main():
	if len(sys.argv) > 1:
		exit(run(parser.parse_args()))
	else:
		print(__doc__.strip().format(parser.format_usage()))
