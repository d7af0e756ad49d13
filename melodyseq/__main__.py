import argparse
import logging
import os
import sys
import typing

import yaml

import melodyseq.ambiance
import melodyseq.constants
import melodyseq.exceptions
import melodyseq.generation
import melodyseq.inspiration
import melodyseq.midi_codec
import melodyseq.parameters
import melodyseq.variation


logger = logging.getLogger(__name__)


def load_config (config_path: str = 'melodyseq.yaml') -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		return yaml.safe_load(f) or {}


def _merge (section: typing.Dict[str, typing.Any], args: argparse.Namespace, names: typing.Iterable[str]) -> typing.Dict[str, typing.Any]:

	"""Command-line values override the config section; unset flags leave it alone."""

	merged = dict(section or {})

	for name in names:
		value = getattr(args, name, None)
		if value is not None:
			merged[name] = value

	return merged


def _output_path (args: argparse.Namespace, export: typing.Dict[str, typing.Any], default_name: str) -> str:

	if args.output:
		return args.output

	return os.path.join(export.get('directory', '.'), default_name)


def run_generate (args: argparse.Namespace, config: dict) -> None:

	settings = _merge(config.get('generation', {}), args, ['root', 'scale_name', 'style', 'mood', 'part', 'step_count', 'octave_min', 'octave_max', 'seed'])
	export = config.get('export', {}) or {}

	parameters = melodyseq.parameters.GenerationParameters(**settings)
	notes = melodyseq.generation.generate(parameters)

	sequence = melodyseq.midi_codec.steps_to_sequence(
		notes,
		note_length = export.get('note_length', '16n'),
		bpm = export.get('bpm', melodyseq.constants.DEFAULT_BPM),
		gate = export.get('gate', 0.8)
	)

	melodyseq.midi_codec.write_file(_output_path(args, export, f"{parameters.part.value}.mid"), sequence)


def run_ambiance (args: argparse.Namespace, config: dict) -> None:

	export = config.get('export', {}) or {}

	result = melodyseq.ambiance.generate_ambiance(args.name, seed=args.seed)
	sequence = melodyseq.midi_codec.steps_to_sequence(
		result.notes,
		note_length = export.get('note_length', '16n'),
		bpm = result.suggested_tempo,
		gate = export.get('gate', 0.8)
	)

	logger.info(f"{result.name}: {result.description}. Try the {result.suggested_synth} synth.")
	melodyseq.midi_codec.write_file(_output_path(args, export, f"{args.name}.mid"), sequence)


def run_vary (args: argparse.Namespace, config: dict) -> None:

	settings = _merge(config.get('variation', {}), args, ['transpositions', 'swing_amount', 'humanize_ms', 'seed', 'root', 'scale_name'])

	for flag in ('retrograde', 'invert', 'keep_scale'):
		if getattr(args, flag):
			settings[flag] = True

	options = melodyseq.variation.VariationOptions(**settings)
	export = config.get('export', {}) or {}

	with open(args.input, 'rb') as f:
		variants = melodyseq.variation.vary(f.read(), options)

	stem = os.path.splitext(os.path.basename(args.input))[0]

	for offset, data in zip(options.transpositions, variants):

		path = os.path.join(export.get('directory', '.'), f"{stem}_{offset:+d}.mid")

		with open(path, 'wb') as f:
			f.write(data)

		logger.info(f"Saved variant {offset:+d} to {path}")


def run_inspire (args: argparse.Namespace, config: dict) -> None:

	settings = _merge(config.get('inspiration', {}), args, ['length_in_bars', 'density', 'seed', 'root', 'scale_name', 'steps_per_bar'])

	if args.free:
		settings['keep_scale'] = False

	options = melodyseq.inspiration.InspirationOptions(**settings)
	export = config.get('export', {}) or {}

	with open(args.input, 'rb') as f:
		data = melodyseq.inspiration.inspire(f.read(), options)

	stem = os.path.splitext(os.path.basename(args.input))[0]
	path = _output_path(args, export, f"{stem}_inspired.mid")

	with open(path, 'wb') as f:
		f.write(data)

	logger.info(f"Saved inspired phrase to {path}")


def build_parser () -> argparse.ArgumentParser:

	parser = argparse.ArgumentParser(prog='melodyseq', description='Procedural melody and pattern generation.')
	parser.add_argument('--config', default='melodyseq.yaml', help='YAML config file (default: melodyseq.yaml)')
	parser.add_argument('--verbose', action='store_true', help='Log at debug level')

	commands = parser.add_subparsers(dest='command', required=True)

	generate = commands.add_parser('generate', help='Generate a pattern for one part')
	generate.add_argument('--part', choices=[p.value for p in melodyseq.parameters.Part])
	generate.add_argument('--style', choices=[s.value for s in melodyseq.parameters.Style])
	generate.add_argument('--mood', choices=[m.value for m in melodyseq.parameters.Mood])
	generate.add_argument('--root')
	generate.add_argument('--scale', dest='scale_name')
	generate.add_argument('--steps', dest='step_count', type=int)
	generate.add_argument('--octave-min', dest='octave_min', type=int)
	generate.add_argument('--octave-max', dest='octave_max', type=int)
	generate.add_argument('--seed', type=int)
	generate.add_argument('-o', '--output')
	generate.set_defaults(handler=run_generate)

	ambiance = commands.add_parser('ambiance', help='Generate a pattern from a named ambiance')
	ambiance.add_argument('name', choices=melodyseq.ambiance.available_ambiances())
	ambiance.add_argument('--seed', type=int)
	ambiance.add_argument('-o', '--output')
	ambiance.set_defaults(handler=run_ambiance)

	vary = commands.add_parser('vary', help='Write variations of a MIDI file')
	vary.add_argument('input')
	vary.add_argument('-t', '--transpose', dest='transpositions', type=int, nargs='+')
	vary.add_argument('--swing', dest='swing_amount', type=float)
	vary.add_argument('--humanize', dest='humanize_ms', type=float)
	vary.add_argument('--retrograde', action='store_true')
	vary.add_argument('--invert', action='store_true')
	vary.add_argument('--keep-scale', dest='keep_scale', action='store_true')
	vary.add_argument('--root')
	vary.add_argument('--scale', dest='scale_name')
	vary.add_argument('--seed', type=int)
	vary.set_defaults(handler=run_vary)

	inspire = commands.add_parser('inspire', help='Write a new phrase in the manner of a MIDI file')
	inspire.add_argument('input')
	inspire.add_argument('--bars', dest='length_in_bars', type=int)
	inspire.add_argument('--density', type=float)
	inspire.add_argument('--steps-per-bar', dest='steps_per_bar', type=int)
	inspire.add_argument('--free', action='store_true', help='Do not quantize to the scale')
	inspire.add_argument('--root')
	inspire.add_argument('--scale', dest='scale_name')
	inspire.add_argument('--seed', type=int)
	inspire.add_argument('-o', '--output')
	inspire.set_defaults(handler=run_inspire)

	return parser


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point for the melodyseq command line.
	"""

	args = build_parser().parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	config = load_config(args.config)

	try:
		args.handler(args, config)
	except (melodyseq.exceptions.MelodyseqError, OSError) as exc:
		logger.error(str(exc))
		return 1

	return 0


if __name__ == "__main__":
	sys.exit(main())
