from prometheus_client import Counter, Histogram

METRIC_PREFIX = 'medlearn_'

backend_exercise_metrics_label_names = [
    'exercise_type',
]
BACKEND_EXERCISE_METRICS = {
    'graded': Counter(
        METRIC_PREFIX + 'exercise_graded_total',
        'Total number of exercise submissions graded',
        labelnames=backend_exercise_metrics_label_names,
    ),
    'score': Histogram(
        METRIC_PREFIX + 'exercise_score_percent',
        'Score obtained in graded exercise submissions',
        labelnames=backend_exercise_metrics_label_names,
        buckets=(10, 20, 30, 40, 50, 60, 70, 80, 90, 100),
    ),
    'attempts_exhausted': Counter(
        METRIC_PREFIX + 'exercise_attempts_exhausted_total',
        'Submissions rejected because no attempts were left',
        labelnames=backend_exercise_metrics_label_names,
    ),
    'grading_time': Histogram(
        METRIC_PREFIX + 'exercise_grading_time_seconds',
        'Time spent grading and storing a submission',
        labelnames=backend_exercise_metrics_label_names,
        buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
    ),
}

CLIENT_SUBMISSION_METRICS = {
    'dispatched': Counter(
        METRIC_PREFIX + 'client_submission_dispatched_total',
        'Submissions sent to the exercise API',
    ),
    'failed': Counter(
        METRIC_PREFIX + 'client_submission_failed_total',
        'Submissions that ended with a transport or validation error',
    ),
    'duplicates_blocked': Counter(
        METRIC_PREFIX + 'client_submission_duplicates_blocked_total',
        'Submit calls ignored because a submission was in flight',
    ),
    'confirmations_requested': Counter(
        METRIC_PREFIX + 'client_submission_confirmations_requested_total',
        'Submit calls held back to confirm unanswered questions',
    ),
    'request_time': Histogram(
        METRIC_PREFIX + 'client_submission_request_seconds',
        'Round trip time of a submission request',
        buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
    ),
}
