from promoloader.core.models import PipelineConfig

FILES_HELP_TEXT = "Comma-separated list of gzip files (one code per line)"

TMP_DIR_HELP_TEXT = (
    "Temporary directory for intermediate files (created if absent).\n"
    "Holds file_<n>.raw and file_<n>.sorted; nothing is deleted afterwards.\n"
    f"Default: {PipelineConfig.DEFAULT_TMP_DIR}"
)

OUTPUT_HELP_TEXT = f"Output file for valid promo codes. Default: {PipelineConfig.DEFAULT_OUTPUT}"

SORT_BIN_HELP_TEXT = (
    "Path to sort binary. It receives one file path and prints sorted lines.\n"
    "Run with LC_ALL=C so that it sorts by byte order.\n"
    f"Default: {PipelineConfig.DEFAULT_SORT_BIN}"
)

PARALLELISM_HELP_TEXT = (
    "Number of files to filter in parallel (0 or less means 1). "
    f"Default: {PipelineConfig.DEFAULT_PARALLELISM}"
)

TIMEOUT_HELP_TEXT = (
    "Overall timeout (e.g. 30m, 1h, 1h30m); 0s = no timeout.\n"
    "Only checked between filter jobs: sorting and merging always run to completion."
)

EPILOG_TEXT = (
    "A code is valid when it is 8 to 10 bytes long and appears in at least two files.\n"
    "\n"
    "Examples:\n"
    "  %(prog)s -files a.gz,b.gz,c.gz\n"
    "  %(prog)s -files a.gz,b.gz -tmp-dir /data/tmp -output codes.txt -parallelism 4\n"
    "  LC_ALL=C %(prog)s -files a.gz,b.gz -sort-bin /usr/bin/sort -timeout 1h\n"
)
