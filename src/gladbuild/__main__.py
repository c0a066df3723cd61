from gladbuild.cli import main

raise SystemExit(main())
