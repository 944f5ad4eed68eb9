# Run YOLOv5 detection over a video file and draw the results on every frame
#
# Usage:
#   python yolov5_video_inference.py --model models/yolov5s.mlpackage --input video.mp4 --display
#   python yolov5_video_inference.py --model models/yolov5s.pt --input video.mp4 --output result.mp4 --stride 2

import argparse
import logging
import os
import time

import cv2
from dotenv import load_dotenv

from yolov5_coreml import CameraPosition, Detector, DetectorConfig, OverlayProcessor
from yolov5_coreml.config import DEFAULT_MODEL_PATH
from yolov5_coreml.log import setup_logging

load_dotenv()

parser = argparse.ArgumentParser(description='Run YOLOv5 inference on a video file')
parser.add_argument('--model', '-m', default=os.getenv('YOLOV5_MODEL_PATH', DEFAULT_MODEL_PATH),
                    help='Path to YOLOv5 model (.mlpackage, or .pt to convert)')
parser.add_argument('--input', '-i', required=True, help='Input video file path')
parser.add_argument('--output', '-o', default=None, help='Output video path (optional, only saves if provided)')
parser.add_argument('--position', choices=['back', 'front'], default='front',
                    help='Camera the video was recorded with, decides orientation (default: front)')
parser.add_argument('--stride', type=int, default=1, help='Run detection every Nth frame (default: 1)')
parser.add_argument('--label-conf', type=float, default=0.2, help='Label confidence threshold (default: 0.2)')
parser.add_argument('--result-conf', type=float, default=0.4, help='Result confidence threshold (default: 0.4)')
parser.add_argument('--display', '-d', action='store_true', help='Show live video preview while processing')
parser.add_argument('--log-level', default='INFO', help='Logging level (default: INFO)')
args = parser.parse_args()

setup_logging(args.log_level)
logger = logging.getLogger("yolov5_video_inference")

detector = Detector(args.model, DetectorConfig(
    label_confidence_threshold=args.label_conf,
    result_confidence_threshold=args.result_conf,
))
if not detector.available:
    logger.warning("No model loaded, frames are written without detections")

processor = OverlayProcessor(
    detector,
    frame_stride=args.stride,
    camera_position=CameraPosition(args.position),
)


def process_video_file(input_video_path, output_video_path):
    """Annotate every frame of a video; returns (frames, detections, seconds)."""
    cap = cv2.VideoCapture(input_video_path)
    fps = cap.get(cv2.CAP_PROP_FPS)

    out = None
    frame_count = 0
    detection_count = 0
    total_time = 0.0

    while True:
        ret, frame = cap.read()
        if not ret:
            break

        start_time = time.time()
        display_frame = processor.process(frame, input_video_path)
        total_time += time.time() - start_time

        if frame_count % args.stride == 0:
            detection_count += len(processor.get_results(input_video_path))

        # Writer is sized from the first upright frame
        if output_video_path and out is None:
            os.makedirs(os.path.dirname(output_video_path) or '.', exist_ok=True)
            height, width = display_frame.shape[:2]
            fourcc = cv2.VideoWriter_fourcc(*'mp4v')
            out = cv2.VideoWriter(output_video_path, fourcc, fps, (width, height))
        if out:
            out.write(display_frame)

        frame_count += 1

        if args.display:
            cv2.imshow("YOLOv5 Video", display_frame)
            if cv2.waitKey(1) & 0xFF == ord('q'):
                break

    cap.release()
    if out:
        out.release()

    return frame_count, detection_count, total_time


logger.info("Processing: %s", args.input)
frame_count, detection_count, total_time = process_video_file(args.input, args.output)

if args.display:
    cv2.destroyAllWindows()

if frame_count:
    logger.info("Frames: %d, detections: %d, avg %.1fms per frame",
                frame_count, detection_count, total_time / frame_count * 1000)
else:
    logger.warning("No frames read from %s", args.input)
if args.output:
    logger.info("Output: %s", args.output)
