from student_records.cli.main import main

raise SystemExit(main())
