"""A commandline tool to run a scripted election.

Reads an election script (JSON) describing the candidates, the chairman and
a sequence of actions, runs it against a simulated clock and shows the
events and the final tally.
"""

import argparse
import io
import json
import logging
import sys
from typing import List

import chairvote.script
from chairvote.candidate import Candidate
from chairvote.events import Event
from chairvote.persist import to_dict

argparser = argparse.ArgumentParser(
    prog='chairvote',
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    'input_file',
    nargs='?',
    type=argparse.FileType('r', encoding='utf8'),
    help='file to load the election script from',
)
argparser.add_argument(
    '-I', '--use-stdin',
    action='store_true',
    help='load the election script from standard input',
)
argparser.add_argument(
    '-t', '--start-time',
    type=float,
    default=0,
    help='initial reading of the simulated clock, in seconds',
)
argparser.add_argument(
    '-j', '--json',
    dest='as_json',
    action='store_true',
    help='print the final election state as JSON instead of a summary',
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all election log messages',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='show only warnings, such as rejected actions',
)


def main(input_file: io.TextIOBase,
         use_stdin: bool = False,
         start_time: float = 0,
         as_json: bool = False,
         verbose: bool = False,
         quiet: bool = False,
         ) -> None:
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    if use_stdin:
        input_file = sys.stdin
    script = chairvote.script.load(input_file)
    script_run = chairvote.script.run(script, start_time=start_time)
    election = script_run.election
    if as_json:
        show_json(election.snapshot())
        return
    print(f'Ran {len(script.actions)} actions,'
          f' {len(script_run.rejected)} rejected')
    print()
    print('Events:')
    show_events(election.history())
    print()
    print(f'Tally (round {election.round_number}, {election.phase}):')
    show_tally(election.results())


def show_json(state: dict) -> None:
    print(json.dumps(state, indent=2, ensure_ascii=False))


def show_events(events: List[Event]) -> None:
    if not events:
        print('No events')
        return
    for event in events:
        fields = to_dict(event)
        name = fields.pop('class')
        print(' ' * 4 + name, ' '.join(
            f'{key}={value}' for key, value in fields.items()
        ))


def show_tally(candidates: List[Candidate]) -> None:
    n_just_chars = max(len(cand.name) for cand in candidates)
    for i, cand in enumerate(candidates):
        print(str(i).rjust(4), ' ', cand.name.ljust(n_just_chars), ' ',
              cand.vote_count)


def cli() -> None:
    args = argparser.parse_args()
    if not args.input_file and not args.use_stdin:
        argparser.print_usage()
    else:
        main(**vars(args))


if __name__ == '__main__':
    cli()
