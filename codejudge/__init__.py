"""codejudge: client for judging code against test cases on a Judge0 deployment."""
