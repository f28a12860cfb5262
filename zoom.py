import os
import sys
import warnings
from argparse import ArgumentParser

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

from mandelzoom import (
    BarProgress,
    ConfigurationError,
    CpuBackend,
    GifSink,
    MandelzoomError,
    MultiSink,
    PngSink,
    SequenceParameters,
    render_sequence,
)
from mandelzoom.console import log, set_verbose


def build_parser():
    parser = ArgumentParser(description="Render an escape-time zoom sequence toward a pivot point.")

    parser.add_argument('--start-frame', type=int,
                        dest='start_frame', help='first frame index to render (inclusive)',
                        metavar='START_FRAME', default=0)

    parser.add_argument('--end-frame', type=int,
                        dest='end_frame', help='frame index at which to stop (exclusive)',
                        metavar='END_FRAME', default=10)

    parser.add_argument('--image-size', type=int,
                        dest='image_size', help='width and height of every frame in pixels',
                        metavar='IMAGE_SIZE', default=500)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration ceiling per pixel',
                        metavar='MAX_ITERATIONS', default=200)

    parser.add_argument('--window-size', type=float,
                        dest='window_size', help='side length of the window in the complex plane at frame 0',
                        metavar='WINDOW_SIZE', default=1.0)

    parser.add_argument('--pivot-re', type=float,
                        dest='pivot_re', help='real part of the point the sequence zooms toward',
                        metavar='PIVOT_RE', default=-0.5)

    parser.add_argument('--pivot-im', type=float,
                        dest='pivot_im', help='imaginary part of the point the sequence zooms toward',
                        metavar='PIVOT_IM', default=-0.5)

    parser.add_argument('--shrink-factor', type=float,
                        dest='shrink_factor', help='fraction by which the window shrinks between frames, in [0, 1)',
                        metavar='SHRINK_FACTOR', default=0.1)

    parser.add_argument('--output-prefix', type=str,
                        dest='output_prefix', help='prefix prepended to "frame_<index>.png"',
                        metavar='OUTPUT_PREFIX', default='./out/')

    parser.add_argument('--workers', type=int, default=None,
                        help='number of worker processes per frame (default: all cores)')

    parser.add_argument('--history-limit', type=int, default=None, dest='history_limit',
                        help='orbit states remembered for cycle detection; 0 disables it (default: unbounded)')

    parser.add_argument('--backend', choices=['cpu', 'tensorflow'], default='cpu',
                        help='"cpu" is the exact double-precision renderer; "tensorflow" is a faster single-precision approximation.')

    parser.add_argument('--gif', type=str, default=None,
                        help='also assemble the rendered frames into an animated GIF at this path')

    parser.add_argument('--gif-duration', type=float, default=0.1, dest='gif_duration',
                        help='display time of each GIF frame')

    parser.add_argument('--continue-on-error', action='store_true', dest='continue_on_error',
                        help='skip frames that fail and report them at the end instead of aborting')

    parser.add_argument('--no-progress', action='store_true', dest='no_progress',
                        help='replace the per-frame progress bar with a one-line frame counter')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics.')

    return parser


def resolve_parameters(opt, parser: ArgumentParser) -> SequenceParameters:
    params = SequenceParameters(
        start_frame=opt.start_frame,
        end_frame=opt.end_frame,
        image_size=opt.image_size,
        iteration_ceiling=opt.max_iterations,
        initial_window_size=opt.window_size,
        pivot=complex(opt.pivot_re, opt.pivot_im),
        shrink_factor=opt.shrink_factor,
        output_prefix=opt.output_prefix,
    )
    try:
        params.validate()
    except ConfigurationError as exc:
        parser.error(str(exc))
    if opt.workers is not None and opt.workers < 1:
        parser.error("--workers must be at least 1.")
    if opt.history_limit is not None and opt.history_limit < 0:
        parser.error("--history-limit must be non-negative.")
    if opt.gif_duration <= 0:
        parser.error("--gif-duration must be positive.")
    if opt.backend == 'tensorflow' and (opt.workers is not None or opt.history_limit is not None):
        parser.error("--workers and --history-limit only apply to the cpu backend.")
    return params


def build_backend(opt):
    if opt.backend == 'tensorflow':
        from mandelzoom.tensor_backend import TensorFlowBackend

        if _suppress_messages:
            import tensorflow as tf

            tf.get_logger().setLevel("ERROR")
        backend = TensorFlowBackend()
        log("TensorFlow backend on %s" % backend.device)
        return backend
    return CpuBackend(workers=opt.workers, history_limit=opt.history_limit)


def build_sink(opt):
    sink = PngSink()
    if opt.gif:
        return MultiSink([sink, GifSink(opt.gif, duration=opt.gif_duration)])
    return sink


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)
    set_verbose(opt.verbose)

    params = resolve_parameters(opt, parser)
    log("Rendering frames [%d, %d) of %dx%d at %d iterations"
        % (params.start_frame, params.end_frame, params.image_size, params.image_size, params.iteration_ceiling))

    if opt.no_progress:
        def progress_factory(plan):
            print("frame {0} out of {1}".format(plan.index, params.end_frame), end='\r')
            return None
    else:
        def progress_factory(plan):
            return BarProgress(params.image_size, "frame %d" % plan.index)

    try:
        with build_backend(opt) as backend, build_sink(opt) as sink:
            report = render_sequence(
                params,
                backend=backend,
                sink=sink,
                progress_factory=progress_factory,
                continue_on_error=opt.continue_on_error,
            )
    except MandelzoomError as exc:
        print("error: %s" % exc, file=sys.stderr)
        return 1

    for frame, exc in report.failed:
        print("frame %d failed: %s" % (frame, exc), file=sys.stderr)
    return 0 if report.ok else 1


if __name__ == '__main__':
    sys.exit(main())
