"""Model persistence and segmentation I/O."""
