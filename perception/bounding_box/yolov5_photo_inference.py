# YOLOv5 detection on a still photo, letterboxed onto a preview canvas
#
# Usage:
#   python yolov5_photo_inference.py --image photo.jpg --display
#   python yolov5_photo_inference.py --image photo.jpg --output result.png --canvas 800x600

import argparse
import logging
import os

import cv2
from dotenv import load_dotenv

from yolov5_coreml import Detector, DetectorConfig, StillImage, draw_results, fit_frame, format_caption, letterbox
from yolov5_coreml.config import DEFAULT_MODEL_PATH
from yolov5_coreml.log import setup_logging

load_dotenv()

parser = argparse.ArgumentParser(description='Run YOLOv5 detection on a photo')
parser.add_argument('--model', '-m', default=os.getenv('YOLOV5_MODEL_PATH', DEFAULT_MODEL_PATH),
                    help='Path to YOLOv5 model (.mlpackage, or .pt to convert)')
parser.add_argument('--image', '-i', required=True, help='Input image path')
parser.add_argument('--output', '-o', default=None, help='Output image path (optional, only saves if provided)')
parser.add_argument('--canvas', default='800x800', help='Canvas size WxH (default: 800x800)')
parser.add_argument('--label-conf', type=float, default=0.2, help='Label confidence threshold (default: 0.2)')
parser.add_argument('--result-conf', type=float, default=0.4, help='Result confidence threshold (default: 0.4)')
parser.add_argument('--display', '-d', action='store_true', help='Show the annotated canvas')
parser.add_argument('--log-level', default='INFO', help='Logging level (default: INFO)')
args = parser.parse_args()

setup_logging(args.log_level)
logger = logging.getLogger("yolov5_photo_inference")

canvas_w, canvas_h = (int(v) for v in args.canvas.lower().split('x'))

detector = Detector(args.model, DetectorConfig(
    label_confidence_threshold=args.label_conf,
    result_confidence_threshold=args.result_conf,
))

still = StillImage.open(args.image)
frame_rect = fit_frame(still.size, (canvas_w, canvas_h))
results = detector.inference(still, frame_rect)

logger.info("Detections: %d", len(results))
for result in results:
    logger.info("  %s at %s", format_caption(result), result.bounding_box.as_int_xyxy())

canvas = letterbox(still.to_bgr(), frame_rect, (canvas_w, canvas_h))
canvas = draw_results(canvas, results)

if args.output:
    os.makedirs(os.path.dirname(args.output) or '.', exist_ok=True)
    cv2.imwrite(args.output, canvas)
    logger.info("Output: %s", args.output)

if args.display:
    cv2.imshow("YOLOv5 Photo", canvas)
    cv2.waitKey(0)
    cv2.destroyAllWindows()
