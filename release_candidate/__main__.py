import sys

import release_candidate.cli

sys.exit(release_candidate.cli.main())
