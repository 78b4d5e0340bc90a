"""Services — orchestrate core logic around store and identity IO."""
