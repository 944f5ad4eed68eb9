# Live camera YOLOv5 detection with letterboxed preview
#
# Frames are captured on the main loop and detected on one background thread.
# A frame that arrives while a detection is still running is shown with the
# previous results; the worker never queues work.
#
# Usage:
#   python yolov5_camera_inference.py --model models/yolov5s.mlpackage --position back
#   Press 's' to switch camera position, 'q' to quit.

import argparse
import logging
import os
import time
from collections import deque

import cv2
from dotenv import load_dotenv

from yolov5_coreml import (
    CameraPosition,
    DetectionWorker,
    Detector,
    DetectorConfig,
    PixelBuffer,
    SampleBuffer,
    draw_results,
    fit_frame,
    letterbox,
    orientation_for_camera,
)
from yolov5_coreml.config import DEFAULT_MODEL_PATH
from yolov5_coreml.log import setup_logging
from yolov5_coreml.sources import apply_orientation, oriented_size

load_dotenv()

parser = argparse.ArgumentParser(description='Run YOLOv5 detection on a live camera')
parser.add_argument('--model', '-m', default=os.getenv('YOLOV5_MODEL_PATH', DEFAULT_MODEL_PATH),
                    help='Path to YOLOv5 model (.mlpackage, or .pt to convert)')
parser.add_argument('--camera', '-c', type=int, default=0, help='Camera index (default: 0)')
parser.add_argument('--position', choices=['back', 'front'], default='front',
                    help='Camera position, decides frame orientation (default: front)')
parser.add_argument('--label-conf', type=float, default=0.2, help='Label confidence threshold (default: 0.2)')
parser.add_argument('--result-conf', type=float, default=0.4, help='Result confidence threshold (default: 0.4)')
parser.add_argument('--preview', default='640x640', help='Preview size WxH (default: 640x640)')
parser.add_argument('--log-level', default='INFO', help='Logging level (default: INFO)')
args = parser.parse_args()

setup_logging(args.log_level)
logger = logging.getLogger("yolov5_camera_inference")

preview_w, preview_h = (int(v) for v in args.preview.lower().split('x'))
position = CameraPosition(args.position)

detector = Detector(args.model, DetectorConfig(
    label_confidence_threshold=args.label_conf,
    result_confidence_threshold=args.result_conf,
))
if not detector.available:
    logger.warning("No model loaded, preview runs without detections")

worker = DetectionWorker(detector)
cap = cv2.VideoCapture(args.camera)
frame_times = deque(maxlen=30)

logger.info("Starting detection, press 's' to switch camera position, 'q' to quit.")

while True:
    ret, frame = cap.read()
    if not ret:
        break

    orientation = orientation_for_camera(position)
    height, width = frame.shape[:2]
    frame_rect = fit_frame(oriented_size((width, height), orientation), (preview_w, preview_h))

    if not worker.busy:
        sample = SampleBuffer(PixelBuffer(frame, "BGR"), presentation_timestamp=time.time())
        worker.submit(sample, frame_rect, orientation)

    # fps calculations
    frame_times.append(time.time())
    fps = len(frame_times) / (frame_times[-1] - frame_times[0]) if len(frame_times) > 1 else 0

    results = worker.latest()

    display_frame = letterbox(apply_orientation(frame, orientation), frame_rect, (preview_w, preview_h))
    display_frame = draw_results(display_frame, results)
    cv2.putText(display_frame, f"FPS: {fps:.1f}", (10, 30),
                cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 255, 0), 2)

    cv2.imshow("YOLOv5 Camera", display_frame)

    key = cv2.waitKey(1) & 0xFF
    if key == ord('q'):
        break
    if key == ord('s'):
        position = CameraPosition.FRONT if position == CameraPosition.BACK else CameraPosition.BACK
        logger.info("Camera position: %s", position.value)

worker.close()
cap.release()
cv2.destroyAllWindows()
