"""
Command-line entry point for Finger Paint.
"""

import argparse
import logging
import sys

from .app import FingerPaintApp
from .config import AppConfig, CameraConfig, CanvasConfig, HandConfig, PinchConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fingerpaint',
        description='Finger painting with webcam hand tracking',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                           # Default camera, press 's' to start
  %(prog)s --camera 1 --autostart    # Camera 1, start tracking right away
  %(prog)s --pinch-threshold 0.08    # Looser pinches

Gestures:
  Pinch thumb and a finger      - Paint with that finger's colour
  Left index pinch              - Big black eraser dot
  Release a left pinky pinch    - Clear the canvas

Keyboard Controls:
  s      - Start tracking
  x      - Stop tracking
  Space  - Toggle tracking
  c      - Clear canvas
  q/Esc  - Quit
        """)

    # Camera and canvas
    parser.add_argument('--camera', type=int, default=0,
                        help='Camera device index (default: 0)')
    parser.add_argument('--width', type=int, default=640,
                        help='Canvas width in pixels (default: 640)')
    parser.add_argument('--height', type=int, default=480,
                        help='Canvas height in pixels (default: 480)')

    # Tracking
    parser.add_argument('--max-hands', type=int, default=2,
                        help='Maximum number of hands to track (default: 2)')
    parser.add_argument('--detection-confidence', type=float, default=0.5,
                        help='Hand detection confidence threshold (default: 0.5)')
    parser.add_argument('--tracking-confidence', type=float, default=0.5,
                        help='Hand tracking confidence threshold (default: 0.5)')
    parser.add_argument('--pinch-threshold', type=float, default=0.06,
                        help='Normalized thumb-to-fingertip pinch distance (default: 0.06)')
    parser.add_argument('--release-frames', type=int, default=1,
                        help='Unpinched frames before a pinch is released (default: 1)')
    parser.add_argument('--model', type=str, default=HandConfig.model_path,
                        help=f'Hand landmarker model path (default: {HandConfig.model_path})')

    parser.add_argument('--autostart', action='store_true',
                        help='Start hand tracking immediately')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')
    return parser


def config_from_args(args: argparse.Namespace) -> AppConfig:
    """Build the application configuration from parsed arguments."""
    return AppConfig(
        canvas=CanvasConfig(width=args.width, height=args.height),
        camera=CameraConfig(camera_index=args.camera),
        hand=HandConfig(
            max_num_hands=args.max_hands,
            min_detection_confidence=args.detection_confidence,
            min_tracking_confidence=args.tracking_confidence,
            model_path=args.model
        ),
        pinch=PinchConfig(threshold=args.pinch_threshold, release_frames=args.release_frames),
        autostart=args.autostart
    )


def main(argv=None) -> int:
    """Main function with command-line interface."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )
    logger = logging.getLogger("fingerpaint")

    print("Finger Paint")
    print("=" * 40)
    print("Press 's' or click the button to start the webcam, 'q' to quit")

    try:
        app = FingerPaintApp(config_from_args(args))
        app.run()
        return 0
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1
    except (RuntimeError, ValueError) as e:
        logger.error(f"Error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
