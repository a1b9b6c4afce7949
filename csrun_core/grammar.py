"""
Script Grammar Definition.

This module contains the Lark grammar for the C#-flavoured script language
that csrun compiles. It is meant to be used with the Earley parser and the
basic lexer, so keywords are exact tokens and never swallow identifiers
that merely start with one (``returnValue``, ``classify``).
"""

script_grammar = r"""
    start: using_directive* type_decl*

    // --- Top level ---
    using_directive: "using" qualified_name ";"
    qualified_name: NAME ("." NAME)*

    type_decl: modifiers "class" NAME [base_clause] "{" member* "}"
    base_clause: ":" NAME
    modifiers: (PUBLIC | PRIVATE | PROTECTED | INTERNAL | STATIC)*

    // --- Members ---
    ?member: field_decl
           | method_decl
           | ctor_decl

    field_decl: modifiers type_ref NAME ["=" expr] ";"
    method_decl: modifiers type_ref NAME "(" [params] ")" block
    ctor_decl: modifiers NAME "(" [params] ")" block

    params: param ("," param)*
    param: type_ref NAME

    // --- Types ---
    type_ref: NAME array_rank*
    array_rank: "[" "]"

    // --- Statements ---
    block: "{" statement* "}"

    ?statement: local_decl
              | assign_stmt
              | incdec_stmt
              | if_stmt
              | while_stmt
              | for_stmt
              | foreach_stmt
              | return_stmt
              | break_stmt
              | continue_stmt
              | throw_stmt
              | try_stmt
              | expr_stmt
              | block

    local_decl: declaration ";"
    declaration: type_ref NAME ["=" expr]

    assign_stmt: assignment ";"
    ?assignment: lvalue "=" expr   -> assign
               | lvalue "+=" expr  -> add_assign
               | lvalue "-=" expr  -> sub_assign
               | lvalue "*=" expr  -> mul_assign
               | lvalue "/=" expr  -> div_assign
               | lvalue "%=" expr  -> mod_assign

    incdec_stmt: incdec ";"
    ?incdec: lvalue "++" -> increment
           | lvalue "--" -> decrement

    ?lvalue: NAME                  -> name
           | postfix "." NAME      -> member
           | postfix "[" expr "]"  -> index

    if_stmt: "if" "(" expr ")" block [else_clause]
    else_clause: "else" block    -> else_block
               | "else" if_stmt  -> else_if

    while_stmt: "while" "(" expr ")" block
    for_stmt: "for" "(" [for_init] ";" [expr] ";" [for_step] ")" block
    ?for_init: declaration | assignment
    ?for_step: assignment | incdec | expr
    foreach_stmt: "foreach" "(" type_ref NAME "in" expr ")" block

    return_stmt: "return" [expr] ";"
    break_stmt: "break" ";"
    continue_stmt: "continue" ";"
    throw_stmt: "throw" [expr] ";"

    try_stmt: "try" block catch_clause+ [finally_clause]
            | "try" block finally_clause
    catch_clause: "catch" [catch_filter] block
    catch_filter: "(" NAME [NAME] ")"
    finally_clause: "finally" block

    expr_stmt: expr ";"

    // --- Expressions ---
    ?expr: conditional

    ?conditional: or_expr
                | or_expr "?" expr ":" conditional -> ternary

    ?or_expr: and_expr
            | or_expr "||" and_expr -> or_op

    ?and_expr: equality
             | and_expr "&&" equality -> and_op

    ?equality: comparison
             | equality "==" comparison -> eq
             | equality "!=" comparison -> ne

    ?comparison: additive
               | comparison "<" additive  -> lt
               | comparison "<=" additive -> le
               | comparison ">" additive  -> gt
               | comparison ">=" additive -> ge

    ?additive: multiplicative
             | additive "+" multiplicative -> add
             | additive "-" multiplicative -> sub

    ?multiplicative: unary
                   | multiplicative "*" unary -> mul
                   | multiplicative "/" unary -> div
                   | multiplicative "%" unary -> mod

    ?unary: postfix
          | "!" unary -> not_op
          | "-" unary -> neg

    ?postfix: primary
            | postfix "." NAME             -> member
            | postfix "(" [arguments] ")"  -> call
            | postfix "[" expr "]"         -> index

    ?primary: NUMBER  -> number
            | STRING  -> string
            | CHAR    -> char
            | "true"  -> true
            | "false" -> false
            | "null"  -> null
            | "this"  -> this
            | NAME    -> name
            | "(" expr ")"
            | "new" NAME "(" [arguments] ")"               -> new_object
            | "new" NAME "[" expr "]"                      -> new_array
            | "new" NAME array_rank "{" [arguments] "}"    -> array_literal

    arguments: expr ("," expr)*

    // --- Terminals ---
    PUBLIC: "public"
    PRIVATE: "private"
    PROTECTED: "protected"
    INTERNAL: "internal"
    STATIC: "static"

    NAME: /[A-Za-z_][A-Za-z0-9_]*/
    NUMBER: /\d+(\.\d+)?/
    STRING: /"(?:[^"\\\n]|\\.)*"/
    CHAR: /'(?:[^'\\\n]|\\.)'/

    COMMENT: /\/\/[^\n]*/
    BLOCK_COMMENT: /\/\*[\s\S]*?\*\//

    %import common.WS
    %ignore WS
    %ignore COMMENT
    %ignore BLOCK_COMMENT
"""
